"""Trackable entity kinds: the tag half of polymorphic references."""

from enum import StrEnum


class EntityType(StrEnum):
    """Entities and reports that carry a lifecycle status."""

    PROJECTS = "projects"
    SITES = "sites"
    NURSERIES = "nurseries"
    PROJECT_REPORTS = "projectReports"
    SITE_REPORTS = "siteReports"
    NURSERY_REPORTS = "nurseryReports"


REPORT_ENTITY_TYPES: frozenset[EntityType] = frozenset(
    {
        EntityType.PROJECT_REPORTS,
        EntityType.SITE_REPORTS,
        EntityType.NURSERY_REPORTS,
    }
)

# Auditable but not trackable: no notifications, emails or task rollup
FINANCIAL_REPORTS = "financialReports"

AUDITABLE_TYPES: frozenset[str] = frozenset({*EntityType, FINANCIAL_REPORTS})


def is_report(entity_type: EntityType | None) -> bool:
    return entity_type in REPORT_ENTITY_TYPES
