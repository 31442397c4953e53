"""Config for the MarkLogic batch sink."""

from typing import Optional

from pydantic import Field

from marklogic_plugin.domain.entities.document import Format
from marklogic_plugin.domain.entities.errors import ConfigError
from marklogic_plugin.domain.entities.schema import Schema, SchemaType, field_type
from marklogic_plugin.domain.entities.validation import FailureCollector

from .batch_config import FORMAT, BaseBatchMarkLogicConfig

PATH = "path"
BATCH_SIZE = "batchSize"
FILE_NAME_FIELD = "fileNameField"
PAYLOAD_FIELD = "payloadField"

DEFAULT_BATCH_SIZE = 100


class MarkLogicSinkConfig(BaseBatchMarkLogicConfig):
    path: Optional[str] = Field(
        default=None, alias=PATH, description="Directory documents are written to"
    )
    batch_size: int = Field(
        default=DEFAULT_BATCH_SIZE,
        alias=BATCH_SIZE,
        description="Number of documents sent per write",
    )
    file_name_field: Optional[str] = Field(
        default=None, alias=FILE_NAME_FIELD, description="Field holding the document name"
    )
    payload_field: Optional[str] = Field(
        default=None, alias=PAYLOAD_FIELD, description="Field holding the document content"
    )

    def validate_config(
        self, collector: FailureCollector, input_schema: Optional[Schema] = None
    ) -> None:
        super().validate_config(collector)

        if not self._unchecked(BATCH_SIZE) and self.batch_size <= 0:
            collector.add_failure(
                "Batch size must be greater than 0.", None
            ).with_config_property(BATCH_SIZE)

        if not self._unchecked(PATH) and not self.path:
            collector.add_failure("Path must be specified.", None).with_config_property(PATH)

        if self._unchecked(FORMAT):
            return
        try:
            record_format = self.get_format()
        except ConfigError:
            return
        if record_format is None:
            return

        if record_format is Format.AUTO:
            collector.add_failure(
                "Format 'AUTO' can only be used for reading.",
                "Choose JSON, XML, DELIMITED, TEXT or BLOB.",
            ).with_config_property(FORMAT)
            return

        if input_schema is None:
            return

        self._validate_file_name_field(collector, input_schema)
        self._validate_payload_field(collector, input_schema, record_format)

        if record_format is Format.DELIMITED:
            for schema_field in input_schema.fields:
                if not field_type(schema_field).is_simple:
                    collector.add_failure(
                        f"Field '{schema_field.name}' must have a simple type "
                        f"for 'DELIMITED' format.",
                        None,
                    ).with_input_schema_field(schema_field.name)

    def _validate_file_name_field(self, collector: FailureCollector, schema: Schema) -> None:
        if self._unchecked(FILE_NAME_FIELD) or not self.file_name_field:
            return
        schema_field = schema.get_field(self.file_name_field)
        if schema_field is None:
            collector.add_failure(
                f"Input schema must contain file name field '{self.file_name_field}'.",
                None,
            ).with_config_property(FILE_NAME_FIELD)
        elif field_type(schema_field) is not SchemaType.STRING:
            collector.add_failure(
                f"File name field '{self.file_name_field}' must have type String.", None
            ).with_input_schema_field(self.file_name_field)

    def _validate_payload_field(
        self, collector: FailureCollector, schema: Schema, record_format: Format
    ) -> None:
        if record_format not in (Format.TEXT, Format.BLOB) or self._unchecked(PAYLOAD_FIELD):
            return
        if not self.payload_field:
            collector.add_failure(
                f"Payload field must be specified for '{record_format.name}' format.", None
            ).with_config_property(PAYLOAD_FIELD)
            return

        schema_field = schema.get_field(self.payload_field)
        expected = SchemaType.STRING if record_format is Format.TEXT else SchemaType.BYTES
        if schema_field is None:
            collector.add_failure(
                f"Input schema must contain payload field '{self.payload_field}'.", None
            ).with_config_property(PAYLOAD_FIELD)
        elif field_type(schema_field) is not expected:
            collector.add_failure(
                f"Payload field '{self.payload_field}' must have type "
                f"{expected.value.capitalize()}.",
                None,
            ).with_input_schema_field(self.payload_field)
