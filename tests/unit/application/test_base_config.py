from __future__ import annotations

from typing import Dict

import pytest
from conftest import BASE_PROPS

from marklogic_plugin.application.configs.action_config import MarkLogicActionConfig
from marklogic_plugin.application.configs.batch_config import BaseBatchMarkLogicConfig
from marklogic_plugin.domain.entities.document import AuthenticationType, ConnectionType, Format
from marklogic_plugin.domain.entities.validation import FailureCollector


def _validate_action(**overrides: str) -> FailureCollector:
    props: Dict[str, str] = {**BASE_PROPS, "query": "xdmp:log('hi')", **overrides}
    collector = FailureCollector()
    MarkLogicActionConfig.from_properties(props).validate_config(collector)
    return collector


def test_connection_properties_are_parsed() -> None:
    config = MarkLogicActionConfig.from_properties({**BASE_PROPS, "authenticationType": "basic"})

    assert config.port == 8000
    assert config.get_authentication_type() is AuthenticationType.BASIC
    assert config.get_connection_type() is ConnectionType.DIRECT
    assert config.base_url() == "http://localhost:8000"


def test_valid_connection_has_no_failures() -> None:
    assert _validate_action().get_validation_failures() == []


@pytest.mark.parametrize(
    "name", ["referenceName", "host", "port", "user", "password", "authenticationType"]
)
def test_required_connection_properties(name: str, assert_property_failed) -> None:
    collector = _validate_action(**{name: ""})

    assert_property_failed(collector, name)


def test_reference_name_pattern(assert_property_failed) -> None:
    assert_property_failed(_validate_action(referenceName="my source!"), "referenceName")


def test_non_numeric_port_is_reported_not_raised(assert_property_failed) -> None:
    collector = _validate_action(port="eighty")

    assert_property_failed(collector, "port")
    assert "Invalid value for property 'port'" in collector.get_validation_failures()[0].message


def test_port_out_of_range(assert_property_failed) -> None:
    assert_property_failed(_validate_action(port="70000"), "port")


def test_unknown_authentication_type(assert_property_failed) -> None:
    collector = _validate_action(authenticationType="KERBEROS")

    assert_property_failed(collector, "authenticationType")
    assert collector.get_validation_failures()[0].message == (
        "Unknown authentication type for value: KERBEROS"
    )


def test_unknown_connection_type(assert_property_failed) -> None:
    assert_property_failed(_validate_action(connectionType="PROXY"), "connectionType")


def test_macro_properties_are_skipped() -> None:
    config = MarkLogicActionConfig.from_properties(
        {**BASE_PROPS, "port": "${port}", "password": "${secure(pw)}", "query": "${q}"}
    )
    collector = FailureCollector()
    config.validate_config(collector)

    assert collector.get_validation_failures() == []
    assert config.port is None
    assert config.contains_macro("port")
    assert not config.contains_macro("host")


def test_action_query_is_required(assert_property_failed) -> None:
    assert_property_failed(_validate_action(query="   "), "query")


def _validate_batch(**overrides: str) -> FailureCollector:
    props: Dict[str, str] = {**BASE_PROPS, "format": "JSON", **overrides}
    collector = FailureCollector()
    BaseBatchMarkLogicConfig.from_properties(props).validate_config(collector)
    return collector


def test_batch_format_is_required(assert_property_failed) -> None:
    assert_property_failed(_validate_batch(format=""), "format")


def test_batch_format_must_be_known(assert_property_failed) -> None:
    collector = _validate_batch(format="parquet")

    assert_property_failed(collector, "format")
    assert "Unknown format for value: parquet" in collector.get_validation_failures()[0].message


def test_delimited_format_requires_delimiter(assert_property_failed) -> None:
    assert_property_failed(_validate_batch(format="DELIMITED"), "delimiter")


def test_delimited_format_with_delimiter() -> None:
    collector = _validate_batch(format="delimited", delimiter=",")
    config = BaseBatchMarkLogicConfig.from_properties(
        {**BASE_PROPS, "format": "delimited", "delimiter": ","}
    )

    assert collector.get_validation_failures() == []
    assert config.get_format() is Format.DELIMITED
