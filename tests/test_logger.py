"""Tests for the logger pipeline, provider, builder and configuration"""

import io
import json
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import patch

import pytest

from structured_logger import (
    LogLevel,
    Logger,
    LoggerBuilder,
    LoggerConfig,
    LoggerProvider,
    correlation_scope,
)
from structured_logger.core.log_entry import MAX_EXCEPTION_DEPTH, ExceptionInfo, LogEntry
from structured_logger.enrichers import CallbackEnricher, ScopeContextEnricher
from structured_logger.filters import LogLevelFilter
from structured_logger.formatters import JSONFormatter, PlainTextFormatter
from structured_logger.sinks import BaseSink, ConsoleSink, FileSink, RollingInterval


class ListSink(BaseSink):
    """Keep every entry in memory."""

    def __init__(self):
        super().__init__(PlainTextFormatter())
        self.entries = []
        self.close_calls = 0
        self.flush_calls = 0

    def write(self, entry):
        self.entries.append(entry)

    def emit(self, text):
        pass

    def flush(self):
        self.flush_calls += 1

    def close(self):
        self.close_calls += 1


class BrokenSink(BaseSink):
    """Fail on every operation."""

    def __init__(self):
        super().__init__(PlainTextFormatter())

    def emit(self, text):
        raise RuntimeError("disk gone")

    def close(self):
        raise RuntimeError("close failed")


class CountingValue:
    """Count how often the value is rendered."""

    def __init__(self):
        self.renders = 0

    def __str__(self):
        self.renders += 1
        return "counted"


def make_logger(*sinks, enrichers=(), level=LogLevel.INFO, category="App.Test"):
    return Logger(category, sinks, enrichers, LogLevelFilter(default_level=level))


class TestLogLevel:
    """Test log level functionality."""

    def test_log_levels(self):
        assert LogLevel.TRACE < LogLevel.DEBUG
        assert LogLevel.DEBUG < LogLevel.INFO
        assert LogLevel.INFO < LogLevel.WARN
        assert LogLevel.WARN < LogLevel.ERROR
        assert LogLevel.ERROR < LogLevel.CRITICAL
        assert LogLevel.CRITICAL < LogLevel.OFF

    def test_from_string(self):
        assert LogLevel.from_string("DEBUG") == LogLevel.DEBUG
        assert LogLevel.from_string("info") == LogLevel.INFO
        assert LogLevel.from_string("Warning") == LogLevel.WARN
        assert LogLevel.from_string("information") == LogLevel.INFO
        assert LogLevel.from_string("fatal") == LogLevel.CRITICAL
        assert LogLevel.from_string("none") == LogLevel.OFF

    def test_from_string_invalid(self):
        with pytest.raises(ValueError):
            LogLevel.from_string("verbose")
        with pytest.raises(ValueError):
            LogLevel.from_string(None)


class TestLogEntry:
    """Test log entry structure."""

    def test_create_entry(self):
        entry = LogEntry(level=LogLevel.INFO, message="Test message")
        assert entry.level == LogLevel.INFO
        assert entry.message == "Test message"
        assert entry.category == ""
        assert entry.event_id == 0
        assert entry.correlation_id is None
        assert entry.exception is None
        assert entry.properties == {}
        assert entry.timestamp.tzinfo is not None

    def test_none_message_becomes_empty(self):
        assert LogEntry(level=LogLevel.INFO, message=None).message == ""

    def test_naive_timestamp_is_utc(self):
        entry = LogEntry(level=LogLevel.INFO, timestamp=datetime(2024, 1, 1, 12, 0))
        assert entry.timestamp.tzinfo == timezone.utc

    def test_invalid_level(self):
        with pytest.raises(TypeError):
            LogEntry(level=20)

    def test_invalid_exception(self):
        with pytest.raises(TypeError):
            LogEntry(level=LogLevel.ERROR, exception="not an exception")
        info = ExceptionInfo("ValueError", "bad")
        assert LogEntry(level=LogLevel.ERROR, exception=info).exception is info

    def test_exception_is_captured(self):
        entry = LogEntry(level=LogLevel.ERROR, exception=ValueError("bad"))
        assert isinstance(entry.exception, ExceptionInfo)
        assert entry.exception.type_name == "ValueError"
        assert entry.exception.message == "bad"
        assert entry.exception.inner is None

    def test_freeze(self):
        entry = LogEntry(level=LogLevel.INFO, properties={"k": "v"})
        assert not entry.frozen
        assert entry.freeze() is entry
        assert entry.frozen
        with pytest.raises(TypeError):
            entry.properties["k"] = "changed"

    def test_to_dict(self):
        entry = LogEntry(level=LogLevel.DEBUG, message="Test", category="App")
        data = entry.to_dict()
        assert data["level"] == "DEBUG"
        assert data["message"] == "Test"
        assert data["category"] == "App"
        assert data["exception"] is None


class TestExceptionInfo:
    """Test exception chain capture."""

    def test_implicit_context_is_followed(self):
        try:
            try:
                raise KeyError("inner")
            except KeyError:
                raise ValueError("outer")
        except ValueError as e:
            info = ExceptionInfo.from_exception(e)

        assert [link.type_name for link in info.chain()] == ["ValueError", "KeyError"]
        assert info.stack_trace

    def test_suppressed_context_is_dropped(self):
        try:
            try:
                raise KeyError("inner")
            except KeyError:
                raise ValueError("outer") from None
        except ValueError as e:
            info = ExceptionInfo.from_exception(e)

        assert info.depth() == 1

    def test_cycle_terminates(self):
        first = ValueError("first")
        second = KeyError("second")
        first.__context__ = second
        second.__context__ = first

        info = ExceptionInfo.from_exception(first)
        assert info.depth() == 2

    def test_depth_is_bounded(self):
        head = RuntimeError("0")
        current = head
        for i in range(1, 200):
            nxt = RuntimeError(str(i))
            current.__cause__ = nxt
            current = nxt

        info = ExceptionInfo.from_exception(head)
        assert info.depth() == MAX_EXCEPTION_DEPTH

    def test_qualified_type_name(self):
        info = ExceptionInfo.from_exception(json.JSONDecodeError("bad", "{", 0))
        assert info.type_name == "json.decoder.JSONDecodeError"

    def test_to_dict_nests(self):
        inner = ExceptionInfo("KeyError", "'k'")
        outer = ExceptionInfo("ValueError", "bad", "trace", inner)
        assert outer.to_dict() == {
            "type": "ValueError",
            "message": "bad",
            "stackTrace": "trace",
            "innerException": {
                "type": "KeyError",
                "message": "'k'",
                "stackTrace": None,
                "innerException": None,
            },
        }

    def test_not_an_exception(self):
        with pytest.raises(TypeError):
            ExceptionInfo.from_exception("error")


class TestLogger:
    """Test main logger functionality."""

    def test_entry_fields(self):
        sink = ListSink()
        logger = make_logger(sink)

        logger.warn("Order %s placed", 42, event_id=7, customer="c-1")

        entry = sink.entries[0]
        assert entry.level == LogLevel.WARN
        assert entry.message == "Order 42 placed"
        assert entry.category == "App.Test"
        assert entry.event_id == 7
        assert entry.properties == {"customer": "c-1"}

    def test_level_methods(self):
        sink = ListSink()
        logger = make_logger(sink, level=LogLevel.TRACE)

        logger.trace("t")
        logger.debug("d")
        logger.info("i")
        logger.warn("w")
        logger.error("e")
        logger.critical("c")

        assert [e.level for e in sink.entries] == [
            LogLevel.TRACE, LogLevel.DEBUG, LogLevel.INFO,
            LogLevel.WARN, LogLevel.ERROR, LogLevel.CRITICAL,
        ]

    def test_no_sinks_means_disabled(self):
        logger = make_logger(level=LogLevel.TRACE)
        assert not logger.is_enabled(LogLevel.CRITICAL)
        logger.critical("dropped")
        assert logger.get_metrics()["filtered"] == 1

    def test_filtered_call_does_not_render(self):
        sink = ListSink()
        logger = make_logger(sink)
        value = CountingValue()

        logger.debug("value %s", value)
        assert value.renders == 0
        assert sink.entries == []

        logger.info("value %s", value)
        assert value.renders == 1
        assert sink.entries[0].message == "value counted"

    def test_mapping_argument(self):
        sink = ListSink()
        make_logger(sink).info("%(user)s logged in", {"user": "alice"})
        assert sink.entries[0].message == "alice logged in"

    def test_bad_template_does_not_raise(self):
        sink = ListSink()
        make_logger(sink).info("count %d", "many")
        assert sink.entries[0].message == "count %d ('many',)"

    def test_none_message(self):
        sink = ListSink()
        make_logger(sink).info(None)
        assert sink.entries[0].message == ""

    def test_correlation_is_captured(self):
        sink = ListSink()
        logger = make_logger(sink)
        with correlation_scope("req-1"):
            logger.info("inside")
        assert sink.entries[0].correlation_id == "req-1"

    def test_enrichers_first_wins_and_caller_wins(self):
        sink = ListSink()
        enrichers = [
            CallbackEnricher(lambda: {"k": "first", "source": "enricher"}),
            CallbackEnricher(lambda: {"k": "second", "other": 1}),
        ]
        logger = make_logger(sink, enrichers=enrichers)

        logger.info("m", source="caller")

        assert sink.entries[0].properties == {"source": "caller", "k": "first", "other": 1}

    def test_entries_reaching_sinks_are_frozen(self):
        sink = ListSink()
        make_logger(sink).info("m", k="v")
        entry = sink.entries[0]
        assert entry.frozen
        with pytest.raises(TypeError):
            entry.properties["k"] = "changed"

    def test_failing_sink_is_isolated(self, capsys):
        good = ListSink()
        logger = make_logger(BrokenSink(), good)

        logger.info("still delivered")

        assert len(good.entries) == 1
        assert "Sink error (BrokenSink): disk gone" in capsys.readouterr().err
        metrics = logger.get_metrics()
        assert metrics["sink_errors"] == 1
        assert metrics["logged"] == 1

    def test_failing_enricher_is_isolated(self, capsys):
        sink = ListSink()
        enrichers = [
            CallbackEnricher(lambda: 1 / 0),
            CallbackEnricher(lambda: {"after": True}),
        ]
        logger = make_logger(sink, enrichers=enrichers)

        logger.info("m")

        assert sink.entries[0].properties == {"after": True}
        assert "Enricher error (CallbackEnricher)" in capsys.readouterr().err
        assert logger.get_metrics()["enricher_errors"] == 1

    def test_exception_method_attaches_current_exception(self):
        sink = ListSink()
        logger = make_logger(sink)
        try:
            raise ValueError("bad input")
        except ValueError:
            logger.exception("failed")

        entry = sink.entries[0]
        assert entry.level == LogLevel.ERROR
        assert entry.exception.type_name == "ValueError"
        assert entry.exception.message == "bad input"

    def test_exception_argument(self):
        sink = ListSink()
        make_logger(sink).error("failed", exception=KeyError("k"))
        assert sink.entries[0].exception.type_name == "KeyError"

    def test_invalid_exception_argument_raises_to_caller(self):
        sink = ListSink()
        logger = make_logger(sink)
        with pytest.raises(TypeError):
            logger.error("boom", exception="not an exception")
        assert sink.entries == []

    def test_begin_scope(self):
        sink = ListSink()
        logger = make_logger(sink, enrichers=[ScopeContextEnricher()])

        with logger.begin_scope(request="r-1") as scope:
            scope.add_property("user", "u-1")
            logger.info("inside")
        logger.info("outside")

        assert sink.entries[0].properties == {"request": "r-1", "user": "u-1"}
        assert sink.entries[1].properties == {}

    def test_none_arguments_raise(self):
        level_filter = LogLevelFilter()
        with pytest.raises(TypeError):
            Logger(None, [], [], level_filter)
        with pytest.raises(TypeError):
            Logger("App", None, [], level_filter)
        with pytest.raises(TypeError):
            Logger("App", [], None, level_filter)
        with pytest.raises(TypeError):
            Logger("App", [], [], None)


class TestLoggerProvider:
    """Test logger creation and shutdown."""

    def test_loggers_are_cached_per_category(self):
        provider = LoggerProvider([ListSink()], [], LogLevelFilter())
        first = provider.create_logger("App.A")
        assert provider.get_logger("App.A") is first
        assert provider.create_logger("App.B") is not first
        assert first.sinks == provider.sinks

    def test_loggers_share_filter(self):
        sink = ListSink()
        provider = LoggerProvider([sink], [], LogLevelFilter())
        logger = provider.create_logger("App.Data.Repo")

        logger.debug("hidden")
        provider.level_filter.set_namespace_level("App.Data", LogLevel.DEBUG)
        logger.debug("shown")

        assert [e.message for e in sink.entries] == ["shown"]

    def test_close_closes_each_sink_once(self):
        sinks = [ListSink(), ListSink()]
        provider = LoggerProvider(sinks, [], LogLevelFilter())

        provider.close()
        provider.close()

        assert [s.close_calls for s in sinks] == [1, 1]
        assert provider.closed

    def test_context_manager(self):
        sink = ListSink()
        with LoggerProvider([sink], [], LogLevelFilter()) as provider:
            provider.create_logger("App").info("m")
        assert sink.close_calls == 1

    def test_failing_close_is_isolated(self, capsys):
        good = ListSink()
        provider = LoggerProvider([BrokenSink(), good], [], LogLevelFilter())
        provider.close()
        assert good.close_calls == 1
        assert "Sink close error (BrokenSink)" in capsys.readouterr().err

    def test_flush(self):
        sink = ListSink()
        provider = LoggerProvider([sink], [], LogLevelFilter())
        provider.flush()
        assert sink.flush_calls == 1

    def test_none_category_raises(self):
        provider = LoggerProvider([], [], LogLevelFilter())
        with pytest.raises(TypeError):
            provider.create_logger(None)


class TestLoggerBuilder:
    """Test builder pattern."""

    def test_default_console_sink(self):
        provider = LoggerBuilder().build()
        assert len(provider.sinks) == 1
        sink = provider.sinks[0]
        assert isinstance(sink, ConsoleSink)
        assert isinstance(sink.formatter, PlainTextFormatter)

    def test_levels(self):
        provider = (LoggerBuilder()
            .set_minimum_level(LogLevel.WARN)
            .set_namespace_level("App.Services", LogLevel.INFO)
            .set_category_level("App.Services.User", LogLevel.DEBUG)
            .add_sink(ListSink())
            .build())

        level_filter = provider.level_filter
        assert level_filter.get_level("App.Services.User") == LogLevel.DEBUG
        assert level_filter.get_level("App.Services.Order") == LogLevel.INFO
        assert level_filter.get_level("Other") == LogLevel.WARN

    def test_none_arguments_raise(self):
        builder = LoggerBuilder()
        with pytest.raises(TypeError):
            builder.add_sink(None)
        with pytest.raises(TypeError):
            builder.add_enricher(None)
        with pytest.raises(TypeError):
            builder.add_file_sink(None)
        with pytest.raises(TypeError):
            builder.with_config(None)

    def test_console_output(self):
        stream = io.StringIO()
        provider = LoggerBuilder().add_console_sink(stream=stream).build()
        logger = provider.create_logger("App")

        with correlation_scope("req-7"):
            logger.info("Hello %s", "world", user="u-1")

        line = stream.getvalue().rstrip("\n")
        assert line.endswith("[INFO] {CorrelationId: req-7} Hello world [Properties: user=u-1]")

    def test_standard_enrichers(self):
        with patch.dict(os.environ, {"APP_ENVIRONMENT": "Test"}):
            builder = LoggerBuilder().add_standard_enrichers(
                include_version=True, distribution="pytest",
            )
        sink = ListSink()
        provider = builder.add_sink(sink).build()
        logger = provider.create_logger("App")

        with logger.begin_scope(request="r-1"):
            logger.info("m")

        properties = sink.entries[0].properties
        assert properties["Environment"] == "Test"
        assert properties["Version"] == pytest.__version__
        assert properties["request"] == "r-1"
        assert "MachineName" in properties

    def test_with_config(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config = LoggerConfig.from_dict({
                "min_level": "warning",
                "namespace_levels": {"App.Data": "debug"},
                "console_output": False,
                "log_directory": tmpdir,
                "file_prefix": "svc",
                "rolling_interval": "hour",
                "standard_enrichers": False,
            })
            provider = LoggerBuilder().with_config(config).build()

            assert len(provider.sinks) == 1
            sink = provider.sinks[0]
            assert isinstance(sink, FileSink)
            assert isinstance(sink.formatter, JSONFormatter)
            assert sink.file_name_prefix == "svc"
            assert sink.rolling_interval is RollingInterval.HOUR
            assert provider.enrichers == ()
            assert provider.level_filter.get_level("App.Data.Repo") == LogLevel.DEBUG
            assert provider.level_filter.get_level("App.Web") == LogLevel.WARN
            provider.close()


class TestLoggerConfig:
    """Test logger configuration."""

    def test_default_config(self):
        config = LoggerConfig.default()
        assert config.name == "logger"
        assert config.min_level == LogLevel.INFO
        assert config.console_output is True
        assert config.log_directory is None

    def test_debug_config(self):
        config = LoggerConfig.debug_config()
        assert config.min_level == LogLevel.DEBUG
        assert config.colored_output is True

    def test_production_config(self):
        config = LoggerConfig.production_config("/var/log/app")
        assert config.min_level == LogLevel.WARN
        assert config.console_output is False
        assert config.log_directory == Path("/var/log/app")
        assert config.max_backup_files == 30

    def test_invalid_values(self):
        with pytest.raises(ValueError):
            LoggerConfig(min_level="loud")
        with pytest.raises(ValueError):
            LoggerConfig(console_format="xml")
        with pytest.raises(ValueError):
            LoggerConfig(max_file_size=0)
        with pytest.raises(ValueError):
            LoggerConfig(max_backup_files=0)
        with pytest.raises(ValueError):
            LoggerConfig(file_prefix="")
        with pytest.raises(ValueError):
            LoggerConfig(rolling_interval="weekly")

    def test_unknown_keys(self):
        with pytest.raises(ValueError):
            LoggerConfig.from_dict({"async_mode": True})


class TestIntegration:
    """End-to-end logging to rolling JSON files."""

    def test_file_logging(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with patch.dict(os.environ, {"APP_ENVIRONMENT": "Integration"}):
                provider = (LoggerBuilder()
                    .set_minimum_level(LogLevel.DEBUG)
                    .add_file_sink(tmpdir, prefix="app", rolling_interval=RollingInterval.NONE)
                    .add_standard_enrichers()
                    .build())

            logger = provider.create_logger("App.Services.Orders")
            with correlation_scope("req-42"), logger.begin_scope(order="o-1"):
                logger.debug("Processing %s", "o-1")
                try:
                    raise ValueError("invalid order")
                except ValueError:
                    logger.exception("Order failed", attempt=1)
            provider.close()

            files = list(Path(tmpdir).glob("app-*.log"))
            assert len(files) == 1
            records = [json.loads(line) for line in files[0].read_text(encoding="utf-8").splitlines()]

            assert [r["message"] for r in records] == ["Processing o-1", "Order failed"]
            failed = records[1]
            assert failed["level"] == "ERROR"
            assert failed["correlationId"] == "req-42"
            assert failed["exception"]["type"] == "ValueError"
            assert failed["properties"]["attempt"] == 1
            assert failed["properties"]["order"] == "o-1"
            assert failed["properties"]["Environment"] == "Integration"
            assert "MachineName" in failed["properties"]
