"""Tests for observability/logger.py and observability/metrics.py"""
import io
import json
import logging
import sys


class TestStructuredFormatter:
    def _get_record(
        self,
        msg,
        level=logging.INFO,
        exc_info=None,
        extra_fields=None,
    ):
        record = logging.LogRecord(
            name="test",
            level=level,
            pathname="",
            lineno=0,
            msg=msg,
            args=(),
            exc_info=exc_info,
        )
        if extra_fields is not None:
            record.extra_fields = extra_fields
        return record

    def test_basic_format(self):
        from blockrev.observability.logger import StructuredFormatter

        fmt = StructuredFormatter()
        result = json.loads(fmt.format(self._get_record("merge clean")))
        assert result["message"] == "merge clean"
        assert result["level"] == "INFO"
        assert result["logger"] == "test"
        assert "ts" in result

    def test_extra_fields_merged(self):
        from blockrev.observability.logger import StructuredFormatter

        fmt = StructuredFormatter()
        record = self._get_record("msg", extra_fields={"op": "merge", "conflicts": 2})
        result = json.loads(fmt.format(record))
        assert result["op"] == "merge"
        assert result["conflicts"] == 2

    def test_non_json_values_stringified(self):
        from blockrev.observability.logger import StructuredFormatter

        fmt = StructuredFormatter()
        record = self._get_record("msg", extra_fields={"paths": {"root.0"}})
        result = json.loads(fmt.format(record))
        assert result["paths"] == "{'root.0'}"

    def test_exception_info_included(self):
        from blockrev.observability.logger import StructuredFormatter

        fmt = StructuredFormatter()
        try:
            raise ValueError("bad tree")
        except ValueError:
            exc_info = sys.exc_info()
        result = json.loads(fmt.format(self._get_record("error msg", exc_info=exc_info)))
        assert "ValueError" in result["exception"]

    def test_only_guaranteed_keys_without_extras(self):
        from blockrev.observability.logger import StructuredFormatter

        fmt = StructuredFormatter()
        result = json.loads(fmt.format(self._get_record("msg")))
        assert set(result) == {"ts", "level", "logger", "message"}


class TestGetLogger:
    def test_returns_logger_with_handler(self):
        from blockrev.observability.logger import get_logger

        logger = get_logger("test.blockrev.unique1")
        assert isinstance(logger, logging.Logger)
        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_default_level_is_warning(self):
        from blockrev.observability.logger import get_logger

        assert get_logger("test.blockrev.unique2").level == logging.WARNING

    def test_string_level(self):
        from blockrev.observability.logger import get_logger

        assert get_logger("test.blockrev.unique3", level="debug").level == logging.DEBUG

    def test_idempotent_no_duplicate_handlers(self):
        from blockrev.observability.logger import get_logger

        name = "test.blockrev.unique4"
        first = get_logger(name)
        count = len(first.handlers)
        assert get_logger(name, level="DEBUG") is first
        assert len(first.handlers) == count
        assert first.level == logging.WARNING

    def test_custom_stream(self):
        from blockrev.observability.logger import get_logger

        stream = io.StringIO()
        logger = get_logger("test.blockrev.stream_unique", level=logging.INFO, stream=stream)
        logger.info("merge clean", extra={"extra_fields": {"blocks": 4}})
        entry = json.loads(stream.getvalue())
        assert entry["message"] == "merge clean"
        assert entry["blocks"] == 4


class TestMetricsHook:
    def test_noop_satisfies_protocol(self):
        from blockrev.observability.metrics import MetricsHook, NoopMetricsHook

        assert isinstance(NoopMetricsHook(), MetricsHook)

    def test_noop_returns_none(self):
        from blockrev.observability.metrics import NoopMetricsHook

        hook = NoopMetricsHook()
        assert hook.increment("blockrev.merges_total", tags={"outcome": "clean"}) is None
        assert hook.gauge("blockrev.merged_blocks", 3.0) is None

    def test_recording_hook_satisfies_protocol(self, metrics):
        from blockrev.observability.metrics import MetricsHook

        assert isinstance(metrics, MetricsHook)

    def test_object_missing_methods_rejected(self):
        from blockrev.observability.metrics import MetricsHook

        class Partial:
            def increment(self, name, value=1, tags=None):
                pass

        assert not isinstance(Partial(), MetricsHook)
