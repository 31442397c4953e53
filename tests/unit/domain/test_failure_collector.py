from __future__ import annotations

import pytest

from marklogic_plugin.domain.entities.errors import InvalidStageError
from marklogic_plugin.domain.entities.validation import (
    INPUT_SCHEMA_FIELD,
    OUTPUT_SCHEMA_FIELD,
    STAGE_CONFIG,
    FailureCollector,
)


def test_failures_are_collected_with_causes() -> None:
    collector = FailureCollector("source")
    collector.add_failure("Host must be specified.", None).with_config_property("host")
    collector.add_failure("Bad field.", "Make it nullable.").with_output_schema_field(
        "body"
    ).with_input_schema_field("body")

    failures = collector.get_validation_failures()

    assert [f.message for f in failures] == ["Host must be specified.", "Bad field."]
    assert failures[0].causes[0].get_attribute(STAGE_CONFIG) == "host"
    assert failures[1].causes[0].get_attribute(OUTPUT_SCHEMA_FIELD) == "body"
    assert failures[1].causes[1].get_attribute(INPUT_SCHEMA_FIELD) == "body"
    assert failures[1].to_dict()["corrective_action"] == "Make it nullable."


def test_get_or_raise_is_silent_without_failures() -> None:
    FailureCollector().get_or_raise()


def test_get_or_raise_reports_every_failure() -> None:
    collector = FailureCollector()
    collector.add_failure("first", None)
    collector.add_failure("second", None)

    with pytest.raises(InvalidStageError) as exc:
        collector.get_or_raise()

    assert "first" in exc.value.message
    assert len(exc.value.details["errors"]) == 2
