"""MarkLogic batch sink."""

import uuid
from typing import Iterable, List, Mapping, Optional

from marklogic_plugin.application.configs.sink_config import MarkLogicSinkConfig
from marklogic_plugin.domain.entities.document import Document
from marklogic_plugin.domain.entities.schema import Schema
from marklogic_plugin.domain.entities.validation import FailureCollector
from marklogic_plugin.domain.services.record_converter import Record, RecordConverter
from marklogic_plugin.shared import get_logger

from .base import MarkLogicStage

logger = get_logger(__name__)


class MarkLogicSink(MarkLogicStage):
    """Writes every incoming record as one document."""

    plugin_type = "batchsink"
    config_class = MarkLogicSinkConfig

    config: MarkLogicSinkConfig
    _run_config: Optional[MarkLogicSinkConfig] = None
    _converter: Optional[RecordConverter] = None

    def configure(
        self, collector: FailureCollector, input_schema: Optional[Schema] = None
    ) -> None:
        self.config.validate_config(collector, input_schema)

    def prepare_run(
        self, input_schema: Schema, arguments: Optional[Mapping[str, str]] = None
    ) -> None:
        """
        Resolve macros against the run arguments.

        Raises:
            InvalidStageError: If the resolved config is invalid.
        """
        config = self._resolve_config(arguments, input_schema=input_schema)
        self._run_config = config
        self._converter = RecordConverter(
            schema=input_schema,
            record_format=config.get_format(),
            delimiter=config.delimiter,
            file_field=config.file_name_field,
            payload_field=config.payload_field,
        )

    async def write(self, records: Iterable[Record]) -> int:
        """Write records in batches of ``batchSize``; returns documents written."""
        if self._run_config is None or self._converter is None:
            raise RuntimeError("prepare_run() must be called before write()")

        config = self._run_config
        gateway = self._gateway(config)
        written = 0
        batch: List[Document] = []
        for record in records:
            batch.append(self._converter.to_document(record, self.document_uri(record)))
            if len(batch) >= config.batch_size:
                written += await gateway.write_documents(batch)
                batch = []
        if batch:
            written += await gateway.write_documents(batch)

        logger.info("sink.write_completed", stage=self.stage_name, documents=written)
        return written

    def document_uri(self, record: Record) -> str:
        config = self._run_config or self.config
        name = ""
        if config.file_name_field:
            name = str(record.get(config.file_name_field) or "")
        if not name:
            name = uuid.uuid4().hex

        extension = config.get_format().extension
        if extension and not name.endswith(extension):
            name = f"{name}{extension}"

        directory = (config.path or "").rstrip("/")
        return f"{directory}/{name.lstrip('/')}"
