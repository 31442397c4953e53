"""MarkLogic batch source."""

from typing import AsyncIterator, List, Mapping, Optional

from marklogic_plugin.application.configs.source_config import (
    SCHEMA,
    MarkLogicSourceConfig,
)
from marklogic_plugin.domain.entities.document import DocumentSplit, InputMethod
from marklogic_plugin.domain.entities.errors import SchemaParseError
from marklogic_plugin.domain.entities.schema import Schema, SchemaType
from marklogic_plugin.domain.entities.validation import FailureCollector
from marklogic_plugin.domain.services.record_converter import Record, RecordConverter
from marklogic_plugin.domain.services.split_planner import plan_splits
from marklogic_plugin.shared import get_logger

from .base import MarkLogicStage

logger = get_logger(__name__)


class MarkLogicSource(MarkLogicStage):
    """Reads documents selected by a query or a directory as records."""

    plugin_type = "batchsource"
    config_class = MarkLogicSourceConfig

    config: MarkLogicSourceConfig
    _run_config: Optional[MarkLogicSourceConfig] = None

    def configure(self, collector: FailureCollector) -> Optional[Schema]:
        """
        Validate the config and return the output schema.

        The schema is returned whenever it parses to a record, even if other
        properties failed; a macro or unusable schema yields ``None``.
        """
        self.config.validate_config(collector)
        if self.config.contains_macro(SCHEMA):
            return None
        try:
            schema = self.config.get_parsed_schema()
        except SchemaParseError:
            return None
        if schema is None or schema.type is not SchemaType.RECORD:
            return None
        return schema

    async def prepare_run(
        self, arguments: Optional[Mapping[str, str]] = None
    ) -> List[DocumentSplit]:
        """
        Resolve macros and plan the read.

        Raises:
            InvalidStageError: If the resolved config is invalid.
            MarkLogicGatewayError: If the estimate request fails.
        """
        config = self._resolve_config(arguments)
        self._run_config = config

        query, directory = self._selection(config)
        bounding_query = config.bounding_query or query
        total = await self._gateway(config).estimate(bounding_query, directory)
        splits = plan_splits(total, config.max_splits or 1)

        logger.info(
            "source.splits_planned",
            stage=self.stage_name,
            total=total,
            splits=len(splits),
        )
        return splits

    async def read(self, split: DocumentSplit) -> AsyncIterator[Record]:
        """Yield the records of one split, page by page."""
        config = self._require_run_config()
        gateway = self._gateway(config)
        converter = RecordConverter(
            schema=config.get_parsed_schema(),
            record_format=config.get_format(),
            delimiter=config.delimiter,
            file_field=config.file_field,
            payload_field=config.payload_field,
        )
        query, directory = self._selection(config)

        position = split.start
        remaining = split.length
        while remaining > 0:
            uris = await gateway.search_uris(
                query, directory, position, min(self.page_length, remaining)
            )
            if not uris:
                break
            for uri in uris:
                document = await gateway.read_document(uri)
                yield converter.to_record(document)
            position += len(uris)
            remaining -= len(uris)

    async def read_all(
        self, arguments: Optional[Mapping[str, str]] = None
    ) -> AsyncIterator[Record]:
        """Prepare the run and read every split in order."""
        for split in await self.prepare_run(arguments):
            async for record in self.read(split):
                yield record

    def _require_run_config(self) -> MarkLogicSourceConfig:
        if self._run_config is None:
            raise RuntimeError("prepare_run() must be called before read()")
        return self._run_config

    @staticmethod
    def _selection(config: MarkLogicSourceConfig):
        if config.get_input_method() is InputMethod.PATH:
            return None, config.path
        return config.query, None
