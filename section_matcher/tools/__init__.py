"""Command line tools built on the section matcher."""
