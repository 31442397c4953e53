"""Properties shared by the batch source and sink."""

from typing import Optional

from pydantic import Field

from marklogic_plugin.domain.entities.document import Format, parse_option
from marklogic_plugin.domain.entities.errors import ConfigError
from marklogic_plugin.domain.entities.validation import FailureCollector

from .base_config import BaseMarkLogicConfig

FORMAT = "format"
DELIMITER = "delimiter"


class BaseBatchMarkLogicConfig(BaseMarkLogicConfig):
    format: Optional[str] = Field(default=None, alias=FORMAT)
    delimiter: Optional[str] = Field(default=None, alias=DELIMITER)

    def get_format(self) -> Optional[Format]:
        """
        Parsed document format.

        Raises:
            ConfigError: If the property holds an unknown format.
        """
        if self.format is None:
            return None
        return parse_option(Format, self.format, "format", FORMAT)

    def validate_config(self, collector: FailureCollector) -> None:
        super().validate_config(collector)

        if self._unchecked(FORMAT):
            return

        try:
            record_format = self.get_format()
        except ConfigError as exc:
            collector.add_failure(exc.message, None).with_config_property(FORMAT)
            return

        if record_format is None:
            collector.add_failure("Format must be specified.", None).with_config_property(FORMAT)
        elif (
            record_format is Format.DELIMITED
            and not self._unchecked(DELIMITER)
            and not self.delimiter
        ):
            collector.add_failure(
                "Delimiter must be specified for 'DELIMITED' format.", None
            ).with_config_property(DELIMITER)
