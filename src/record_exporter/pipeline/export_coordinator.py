"""
Export Coordinator - Main Orchestrator.

Drives one export through its state machine:

    IDLE -> INITIALIZING -> STREAMING -> COMPLETED
                 |              |-----> CANCELLED (consumer closed the sink)
                 |              '-----> FAILED    (partial output already sent)
                 '--------------------> FAILED    (nothing written)

Initialization validates the request, resolves the form, builds the query,
runs the ``alter_export`` and ``alter_query`` hooks, re-applies scope and
owner constraints, and initializes the encoder. Only then is a cursor
opened. Streaming pulls one record at a time, transforms it, and hands it to
the encoder; sink backpressure throttles the pull loop.
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import Any, Optional

from record_exporter.config.models import ExportConfig, OnRecordError
from record_exporter.cursor.record_cursor import RecordCursor
from record_exporter.domain.entities import (
    ExportRequest,
    ExportSession,
    ExportState,
    ExportSummary,
    Form,
    ResultCode,
)
from record_exporter.domain.errors import (
    ExportError,
    FormLoadError,
    FormNotFoundError,
    MalformedRecordError,
    SinkClosedError,
    StoreError,
    TransformError,
)
from record_exporter.encoders.registry import EncoderRegistry
from record_exporter.forms.protected_fields import resolve_protected_fields
from record_exporter.hooks.registry import HookRegistry
from record_exporter.interfaces.audit_logger import AuditLogger
from record_exporter.interfaces.form_repository import FormRepository
from record_exporter.interfaces.metrics_collector import MetricsCollector
from record_exporter.interfaces.output_sink import OutputSink
from record_exporter.interfaces.record_store import RecordStore
from record_exporter.query.builder import QueryBuilder
from record_exporter.resilience.error_handler import ErrorHandler, RetryExhausted
from record_exporter.transform.links import LinkResolver
from record_exporter.transform.row_transformer import RowTransformer
from record_exporter.validation.request_validator import RequestValidator

logger = logging.getLogger(__name__)


class ExportCoordinator:
    """Main orchestrator for streaming exports."""

    def __init__(
        self,
        store: RecordStore,
        forms: FormRepository,
        config: Optional[ExportConfig] = None,
        encoders: Optional[EncoderRegistry] = None,
        hooks: Optional[HookRegistry] = None,
        audit_logger: Optional[AuditLogger] = None,
        metrics_collector: Optional[MetricsCollector] = None,
        error_handler: Optional[ErrorHandler] = None,
        request_validator: Optional[RequestValidator] = None,
    ) -> None:
        """
        Initialize coordinator with all dependencies.

        Args:
            store: Issues cursors over matching records
            forms: Resolves the form that scopes the export
            config: Export configuration
            encoders: Format registry (json, ndjson, csv by default)
            hooks: Extension callbacks
            audit_logger: For the audit trail (optional)
            metrics_collector: For performance metrics (optional)
            error_handler: Retry policy for form load and cursor open
            request_validator: Pre-flight request checks
        """
        self.store = store
        self.forms = forms
        self.config = config or ExportConfig()
        self.encoders = encoders or EncoderRegistry()
        self.hooks = hooks or HookRegistry()
        self.audit_logger = audit_logger
        self.metrics_collector = metrics_collector
        self.error_handler = error_handler or ErrorHandler(self.config.resilience)
        self.request_validator = request_validator or RequestValidator()
        self.query_builder = QueryBuilder(self.config.query)
        self.transformer = RowTransformer(
            self.config.transform,
            context=self.config.global_settings.protected_context,
        )
        self.link_resolver = LinkResolver(
            api_host=self.config.global_settings.api_host,
            path_template=self.config.transform.link_path_template,
            hooks=self.hooks,
        )

    def export(self, request: ExportRequest, sink: OutputSink) -> ExportSummary:
        """
        Run one export to completion.

        Args:
            request: What to export and on whose behalf
            sink: Destination for encoded bytes

        Returns:
            ExportSummary for completed and cancelled exports

        Raises:
            ExportError: Any failure; ``output_started`` tells whether the
                sink already received a partial document
        """
        start_time = time.perf_counter()
        session = ExportSession(request=request, correlation_id=str(uuid.uuid4()))
        if self.audit_logger:
            self.audit_logger.set_correlation_id(session.correlation_id)

        # 1. Initialize: nothing reaches the sink if this fails
        session.transition(ExportState.INITIALIZING)
        try:
            cursor = self._initialize(session, sink)
        except Exception as e:
            self._finish(session, ExportState.FAILED, start_time, error=e)
            raise

        # 2. Stream
        session.transition(ExportState.STREAMING)
        try:
            self._stream(session, cursor, sink)
        except SinkClosedError:
            logger.info(
                f"Export {session.correlation_id} cancelled by consumer after "
                f"{session.records_written} records"
            )
            return self._finish(session, ExportState.CANCELLED, start_time)
        except ExportError as e:
            e.output_started = session.output_started or _output_started(session)
            sink.abort(e)
            self._finish(session, ExportState.FAILED, start_time, error=e)
            raise
        except Exception as e:
            wrapped = ExportError(
                f"Unexpected failure while streaming: {e}",
                output_started=session.output_started or _output_started(session),
            )
            sink.abort(wrapped)
            self._finish(session, ExportState.FAILED, start_time, error=wrapped)
            raise wrapped from e
        finally:
            cursor.close()
            session.cursor_open = False

        return self._finish(session, ExportState.COMPLETED, start_time)

    def _initialize(self, session: ExportSession, sink: OutputSink) -> RecordCursor:
        request = session.request

        # Fast reject before any store access
        self.request_validator.validate(request, self.encoders)

        form = self._load_form(request.form_id)
        session.form = form
        if self.audit_logger:
            self.audit_logger.log_export_start(form.id, request.normalized_format)

        protected = resolve_protected_fields(
            form, self.config.global_settings.protected_context
        )
        session.protected_fields = protected

        query = self.query_builder.build(
            request.raw_filter,
            request.derived_filter,
            scope_id=form.id,
            is_privileged=request.is_privileged,
            owner_id=request.owner_id,
        )

        encoder = self.encoders.create(
            request.format, form, sink, self.config.encoding, protected
        )
        session.encoder = encoder

        # Hooks may narrow the query; scope and owner are re-applied after them
        self.hooks.alter_export(query, form, encoder)
        query = self.hooks.alter_query(query)
        query = self.query_builder.enforce(
            query,
            scope_id=form.id,
            is_privileged=request.is_privileged,
            owner_id=request.owner_id,
        )
        session.query = query

        encoder.init()

        cursor = self._open_cursor(session)
        session.cursor_open = True
        return cursor

    def _load_form(self, form_id: str) -> Form:
        try:
            form = self.error_handler.retry(
                lambda: self.forms.load_form(form_id),
                operation_name="load_form",
            )
        except RetryExhausted as e:
            raise FormLoadError(f"Unable to load form {form_id}: {e}") from e

        if form is None:
            raise FormNotFoundError(f"Form {form_id} not found")
        return form

    def _open_cursor(self, session: ExportSession) -> RecordCursor:
        query = session.query or {}
        try:
            source = self.error_handler.retry(
                lambda: self.store.open_cursor(query),
                operation_name="open_cursor",
            )
        except RetryExhausted as e:
            raise StoreError(f"Unable to open cursor: {e}") from e
        return RecordCursor(source, name=f"cursor[{session.correlation_id[:8]}]")

    def _stream(self, session: ExportSession, cursor: RecordCursor, sink: OutputSink) -> None:
        form = session.form
        encoder = session.encoder
        if form is None or encoder is None:
            raise ExportError("Export session is not initialized")

        while True:
            if sink.closed:
                raise SinkClosedError("Sink closed by consumer")

            try:
                record = cursor.next()
            except MalformedRecordError as e:
                session.records_read += 1
                self._skip_record(session, None, e)
                continue
            if record is None:
                break
            session.records_read += 1

            try:
                transformed = self.transformer.transform(
                    record, form, self.link_resolver, session.protected_fields
                )
            except TransformError as e:
                self._skip_record(session, record, e)
                continue

            encoder.write_record(transformed)
            session.records_written += 1
            session.output_started = _output_started(session)

        encoder.finish()
        session.output_started = _output_started(session)
        session.sink_open = False

    def _skip_record(self, session: ExportSession, record: Any, error: TransformError) -> None:
        """Apply the per-record error policy; re-raises under ``abort``."""
        if self.config.transform.on_record_error != OnRecordError.SKIP:
            raise error
        session.records_skipped += 1
        record_id = _record_id(record, self.config.transform.identity_field)
        logger.warning(f"Skipping record {record_id}: {error.message}")
        if self.audit_logger:
            self.audit_logger.log_record_skipped(record_id, error.message)

    def _finish(
        self,
        session: ExportSession,
        state: ExportState,
        start_time: float,
        error: Optional[BaseException] = None,
    ) -> ExportSummary:
        session.transition(state)
        duration = time.perf_counter() - start_time
        format_name = session.request.normalized_format

        if error is not None:
            logger.error(
                f"Export {session.correlation_id} failed in "
                f"{session.history[-1].value}: {error}"
            )
            if self.audit_logger:
                self.audit_logger.log_anomaly(
                    f"Export failed: {error}",
                    severity="ERROR",
                    context={"output_started": session.output_started},
                )

        if self.audit_logger:
            self.audit_logger.log_export_end(state.value, session.records_written, duration)

        if self.metrics_collector:
            tags = {"format": format_name, "state": state.value}
            self.metrics_collector.record_timing("export_duration_seconds", duration, tags)
            self.metrics_collector.record_count("records_read_total", session.records_read, tags)
            self.metrics_collector.record_count(
                "records_written_total", session.records_written, tags
            )
            self.metrics_collector.record_count(
                "records_skipped_total", session.records_skipped, tags
            )

        result_code = ResultCode.OK
        if state == ExportState.CANCELLED:
            result_code = ResultCode.CANCELLED
        elif isinstance(error, ExportError):
            result_code = error.result_code
        elif error is not None:
            result_code = ResultCode.INTERNAL_ERROR

        return ExportSummary(
            correlation_id=session.correlation_id,
            form_id=session.form.id if session.form else session.request.form_id,
            format=format_name,
            state=state,
            result_code=result_code,
            records_read=session.records_read,
            records_written=session.records_written,
            records_skipped=session.records_skipped,
            duration_seconds=duration,
        )


def _output_started(session: ExportSession) -> bool:
    return bool(getattr(session.encoder, "output_started", False))


def _record_id(record: Any, identity_field: str) -> Optional[str]:
    if isinstance(record, dict) and record.get(identity_field) is not None:
        return str(record[identity_field])
    return None
