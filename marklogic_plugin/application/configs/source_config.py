"""Config for the MarkLogic batch source."""

from typing import Optional

from pydantic import Field

from marklogic_plugin.domain.entities.document import Format, InputMethod, parse_option
from marklogic_plugin.domain.entities.errors import ConfigError, SchemaParseError
from marklogic_plugin.domain.entities.schema import Schema, SchemaType, field_type
from marklogic_plugin.domain.entities.validation import FailureCollector

from .batch_config import FORMAT, BaseBatchMarkLogicConfig

INPUT_METHOD = "inputMethod"
QUERY = "query"
PATH = "path"
BOUNDING_QUERY = "boundingQuery"
MAX_SPLITS = "maxSplits"
FILE_FIELD = "fileField"
PAYLOAD_FIELD = "payloadField"
SCHEMA = "schema"


class MarkLogicSourceConfig(BaseBatchMarkLogicConfig):
    input_method: Optional[str] = Field(default=None, alias=INPUT_METHOD)
    query: Optional[str] = Field(default=None, alias=QUERY, description="Query for data search")
    path: Optional[str] = Field(default=None, alias=PATH, description="Directory to read from")
    bounding_query: Optional[str] = Field(
        default=None, alias=BOUNDING_QUERY, description="Query used to generate splits"
    )
    max_splits: Optional[int] = Field(
        default=None, alias=MAX_SPLITS, description="Maximum amount of splits"
    )
    file_field: Optional[str] = Field(
        default=None, alias=FILE_FIELD, description="Field to set file name"
    )
    payload_field: Optional[str] = Field(
        default=None, alias=PAYLOAD_FIELD, description="Field to set payload"
    )
    output_schema: Optional[str] = Field(
        default=None, alias=SCHEMA, description="The schema of the data."
    )

    def get_input_method(self) -> Optional[InputMethod]:
        if self.input_method is None:
            return None
        return parse_option(InputMethod, self.input_method, "input method", INPUT_METHOD)

    def get_parsed_schema(self) -> Optional[Schema]:
        """
        Raises:
            SchemaParseError: With an ``Invalid schema:`` message.
        """
        if not self.output_schema:
            return None
        try:
            return Schema.parse_json(self.output_schema)
        except SchemaParseError as exc:
            raise SchemaParseError(f"Invalid schema: {exc.message}") from exc

    def validate_config(self, collector: FailureCollector) -> None:
        super().validate_config(collector)

        method: Optional[InputMethod] = None
        if not self._unchecked(INPUT_METHOD):
            try:
                method = self.get_input_method()
            except ConfigError as exc:
                collector.add_failure(exc.message, None).with_config_property(INPUT_METHOD)

        if method is not None:
            self._validate_input_method(collector, method)

        if (
            not self._unchecked(MAX_SPLITS)
            and self.max_splits is not None
            and self.max_splits <= 0
        ):
            collector.add_failure(
                "Max splits must be greater than 0.", None
            ).with_config_property(MAX_SPLITS)

        if self.contains_macro(SCHEMA):
            return

        try:
            schema = self.get_parsed_schema()
        except SchemaParseError as exc:
            collector.add_failure(exc.message, None).with_config_property(SCHEMA)
            return

        if schema is None:
            collector.add_failure("Schema must be specified.", None).with_config_property(SCHEMA)
            return
        if schema.type is not SchemaType.RECORD:
            collector.add_failure(
                "Schema must be a record.", None
            ).with_config_property(SCHEMA)
            return

        self._validate_file_field(collector, schema)

        if self._unchecked(FORMAT):
            return
        try:
            record_format = self.get_format()
        except ConfigError:
            # Already reported by the batch config
            return
        if record_format is None:
            return

        self._validate_payload_field(collector, schema, record_format)

        if record_format is Format.AUTO:
            for schema_field in schema.fields:
                if schema_field.name != self.file_field and not schema_field.schema.is_nullable():
                    collector.add_failure(
                        f"Field '{schema_field.name}' must be nullable for 'AUTO' format.",
                        None,
                    ).with_output_schema_field(schema_field.name)

    def _validate_input_method(self, collector: FailureCollector, method: InputMethod) -> None:
        if not self._unchecked(BOUNDING_QUERY) and not self.bounding_query:
            collector.add_failure(
                "Bounding query must be specified.", None
            ).with_config_property(BOUNDING_QUERY)

        if method is InputMethod.QUERY and not self._unchecked(QUERY) and not self.query:
            collector.add_failure(
                "Query must be specified.", None
            ).with_config_property(QUERY)
        elif method is InputMethod.PATH and not self._unchecked(PATH) and not self.path:
            collector.add_failure(
                "Path must be specified.", None
            ).with_config_property(PATH)

    def _validate_file_field(self, collector: FailureCollector, schema: Schema) -> None:
        if self._unchecked(FILE_FIELD) or not self.file_field:
            return
        schema_field = schema.get_field(self.file_field)
        if schema_field is None:
            collector.add_failure(
                f"Schema must contain file field '{self.file_field}'.", None
            ).with_config_property(SCHEMA)
        elif field_type(schema_field) is not SchemaType.STRING:
            collector.add_failure(
                f"File field '{self.file_field}' must have type String.", None
            ).with_output_schema_field(self.file_field)

    def _validate_payload_field(
        self, collector: FailureCollector, schema: Schema, record_format: Format
    ) -> None:
        if self._unchecked(PAYLOAD_FIELD):
            return
        if not self.payload_field:
            if record_format in (Format.TEXT, Format.BLOB):
                collector.add_failure(
                    f"Payload field must be specified for '{record_format.name}' format.",
                    None,
                ).with_config_property(PAYLOAD_FIELD)
            return

        schema_field = schema.get_field(self.payload_field)
        if schema_field is None:
            collector.add_failure(
                f"Schema must contain payload field '{self.payload_field}'.", None
            ).with_config_property(SCHEMA)
        elif record_format is Format.TEXT and field_type(schema_field) is not SchemaType.STRING:
            collector.add_failure(
                f"Payload field '{self.payload_field}' must have type String.", None
            ).with_output_schema_field(self.payload_field)
        elif (
            record_format in (Format.AUTO, Format.BLOB)
            and field_type(schema_field) is not SchemaType.BYTES
        ):
            collector.add_failure(
                f"Payload field '{self.payload_field}' must have type Bytes.", None
            ).with_output_schema_field(self.payload_field)
