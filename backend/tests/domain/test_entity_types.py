"""Tests for the trackable/auditable entity registry."""

import pytest

from statusflow.core.exceptions import UnknownEntityTypeError
from statusflow.db.entities import (
    ENTITY_MODELS,
    POLYMORPHIC_MODELS,
    entity_type_of,
    polymorphic_type,
    resolve_targetable,
)
from statusflow.db.models import (
    FinancialReport,
    Nursery,
    NurseryReport,
    Project,
    ProjectReport,
    ScheduledJob,
    Site,
    SiteReport,
)
from statusflow.domain.entities import AUDITABLE_TYPES, REPORT_ENTITY_TYPES, EntityType, is_report

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "model,expected",
    [
        (Project(), EntityType.PROJECTS),
        (Site(), EntityType.SITES),
        (Nursery(), EntityType.NURSERIES),
        (ProjectReport(), EntityType.PROJECT_REPORTS),
        (SiteReport(), EntityType.SITE_REPORTS),
        (NurseryReport(), EntityType.NURSERY_REPORTS),
    ],
)
def test_entity_type_of_trackable_models(model, expected):
    assert entity_type_of(model) == expected


def test_financial_report_is_auditable_but_not_trackable():
    report = FinancialReport()
    assert entity_type_of(report) is None
    assert polymorphic_type(report) == "financialReports"
    assert "financialReports" in AUDITABLE_TYPES


def test_unregistered_model_has_no_type():
    job = ScheduledJob()
    assert entity_type_of(job) is None
    assert polymorphic_type(job) is None


def test_every_entity_type_has_a_model():
    assert set(ENTITY_MODELS) == set(EntityType)
    assert set(POLYMORPHIC_MODELS) == set(AUDITABLE_TYPES)


def test_is_report():
    for entity_type in REPORT_ENTITY_TYPES:
        assert is_report(entity_type) is True
    assert is_report(EntityType.PROJECTS) is False
    assert is_report(None) is False


async def test_resolve_targetable_unknown_type_raises():
    with pytest.raises(UnknownEntityTypeError) as exc_info:
        await resolve_targetable(session=None, type_name="organisations", target_id=1)

    assert exc_info.value.type_name == "organisations"
