"""
Application Configs - Connection properties

Stage configs are pydantic models built from the raw ``{property: string}``
map handed over by the pipeline host. Properties holding a ``${...}`` macro
are unknown until run time: they are left unset and remembered, and every
check on them is skipped.
"""

import re
from typing import Any, Dict, Mapping, Optional, Set, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError

from marklogic_plugin.domain.entities.document import (
    AuthenticationType,
    ConnectionType,
    parse_option,
)
from marklogic_plugin.domain.entities.errors import ConfigError
from marklogic_plugin.domain.entities.validation import FailureCollector

REFERENCE_NAME = "referenceName"
HOST = "host"
PORT = "port"
DATABASE = "database"
USER = "user"
PASSWORD = "password"
AUTHENTICATION_TYPE = "authenticationType"
CONNECTION_TYPE = "connectionType"

MACRO_MARKER = "${"
_REFERENCE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_\-.$]+$")

C = TypeVar("C", bound="PluginConfig")


class PluginConfig(BaseModel):
    """Base for configs built from host properties."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    _macros: Set[str] = PrivateAttr(default_factory=set)
    _invalid: Dict[str, str] = PrivateAttr(default_factory=dict)

    @classmethod
    def from_properties(cls: Type[C], properties: Mapping[str, Any]) -> C:
        """
        Build a config from raw properties without raising on bad values.

        Empty strings count as unset. Values pydantic cannot coerce are
        dropped and reported later by ``validate_config``.
        """
        values: Dict[str, Any] = {}
        macros: Set[str] = set()
        for name, value in properties.items():
            if value is None or value == "":
                continue
            if isinstance(value, str) and MACRO_MARKER in value:
                macros.add(name)
                continue
            values[name] = value

        invalid: Dict[str, str] = {}
        try:
            config = cls.model_validate(values)
        except ValidationError as exc:
            for error in exc.errors():
                name = str(error["loc"][0]) if error["loc"] else ""
                invalid[name] = error["msg"]
                values.pop(name, None)
            config = cls.model_validate(values)

        config._macros = macros
        config._invalid = invalid
        return config

    def contains_macro(self, name: str) -> bool:
        return name in self._macros

    @property
    def macros(self) -> Set[str]:
        return set(self._macros)

    def _unchecked(self, name: str) -> bool:
        """True when a property is a macro or already failed coercion."""
        return name in self._macros or name in self._invalid

    def validate_config(self, collector: FailureCollector) -> None:
        for name, message in self._invalid.items():
            collector.add_failure(
                f"Invalid value for property '{name}': {message}.", None
            ).with_config_property(name)


class BaseMarkLogicConfig(PluginConfig):
    """Connection properties shared by every MarkLogic stage."""

    reference_name: Optional[str] = Field(default=None, alias=REFERENCE_NAME)
    host: Optional[str] = Field(default=None, alias=HOST)
    port: Optional[int] = Field(default=None, alias=PORT)
    database: Optional[str] = Field(default=None, alias=DATABASE)
    user: Optional[str] = Field(default=None, alias=USER)
    password: Optional[str] = Field(default=None, alias=PASSWORD, repr=False)
    authentication_type: Optional[str] = Field(default=None, alias=AUTHENTICATION_TYPE)
    connection_type: Optional[str] = Field(default=None, alias=CONNECTION_TYPE)

    def get_authentication_type(self) -> Optional[AuthenticationType]:
        if self.authentication_type is None:
            return None
        return parse_option(
            AuthenticationType,
            self.authentication_type,
            "authentication type",
            AUTHENTICATION_TYPE,
        )

    def get_connection_type(self) -> Optional[ConnectionType]:
        if self.connection_type is None:
            return None
        return parse_option(
            ConnectionType, self.connection_type, "connection type", CONNECTION_TYPE
        )

    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    def validate_config(self, collector: FailureCollector) -> None:
        super().validate_config(collector)

        if not self._unchecked(REFERENCE_NAME):
            if not self.reference_name:
                collector.add_failure(
                    "Reference name must be specified.", None
                ).with_config_property(REFERENCE_NAME)
            elif not _REFERENCE_NAME_PATTERN.match(self.reference_name):
                collector.add_failure(
                    f"Invalid reference name '{self.reference_name}'.",
                    "Use only letters, numbers and '_', '-', '.', '$'.",
                ).with_config_property(REFERENCE_NAME)

        if not self._unchecked(HOST) and not self.host:
            collector.add_failure("Host must be specified.", None).with_config_property(HOST)

        if not self._unchecked(PORT):
            if self.port is None:
                collector.add_failure("Port must be specified.", None).with_config_property(PORT)
            elif not 0 < self.port < 65536:
                collector.add_failure(
                    f"Port '{self.port}' is out of range.",
                    "Use a port between 1 and 65535.",
                ).with_config_property(PORT)

        if not self._unchecked(USER) and not self.user:
            collector.add_failure("User must be specified.", None).with_config_property(USER)

        if not self._unchecked(PASSWORD) and not self.password:
            collector.add_failure(
                "Password must be specified.", None
            ).with_config_property(PASSWORD)

        self._validate_option(
            collector, AUTHENTICATION_TYPE, "Authentication type", self.get_authentication_type
        )
        self._validate_option(
            collector, CONNECTION_TYPE, "Connection type", self.get_connection_type
        )

    def _validate_option(self, collector, name, label, getter) -> None:
        if self._unchecked(name):
            return
        try:
            value = getter()
        except ConfigError as exc:
            collector.add_failure(exc.message, None).with_config_property(name)
            return
        if value is None:
            collector.add_failure(f"{label} must be specified.", None).with_config_property(name)
