"""Service layer package.

Exports high-level services consumed by section catalogs and tools.
"""

from .section_service import (
    SectionMatchService,
    SectionMatchServiceConfig,
    match_custom_section,
)

__all__ = ["SectionMatchService", "SectionMatchServiceConfig", "match_custom_section"]
