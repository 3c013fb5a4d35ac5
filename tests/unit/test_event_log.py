"""
Tests for Event Log backends и настройки логирования

Покрывает:
- InMemoryEventLog: sequence, append_batch, discard, stream по токену, by_type
- LoggingEventLog: JSON запись через loguru с audit=True
- CompositeEventLog: единый sequence во всех backend'ах, отзыв пачки при сбое backend'а
- configure_logging: однократная настройка, force
"""

import json

import pytest
from loguru import logger

from tiered_tokens import LogConfig
from tiered_tokens.audit import (
    CompositeEventLog,
    EventLogPort,
    InMemoryEventLog,
    LoggingEventLog,
)
from tiered_tokens.core.domain.events import TokensBurned, Transfer
import tiered_tokens.utils.logger as logger_module
from tiered_tokens.utils.logger import configure_logging


def _transfer(token="0xtoken", amount=1):
    return Transfer(token=token, sender="0xa", recipient="0xb", amount=amount)


class BrokenEventLog(InMemoryEventLog):
    """Backend, отказывающий после armed = True."""

    armed = False

    def append_batch(self, events):
        if self.armed:
            raise IOError("backend unavailable")
        return super().append_batch(events)


@pytest.fixture
def captured():
    """Сообщения loguru, помеченные audit=True."""
    records = []
    handler_id = logger.add(
        lambda message: records.append(message.record),
        level="DEBUG",
        filter=lambda record: record["extra"].get("audit") is True,
    )
    yield records
    logger.remove(handler_id)


# =============================================================================
# IN-MEMORY
# =============================================================================


class TestInMemoryEventLog:
    def test_implements_port(self):
        assert isinstance(InMemoryEventLog(), EventLogPort)

    def test_append_stamps_sequence(self):
        log = InMemoryEventLog()

        first = log.append(_transfer())
        second = log.append(_transfer())

        assert (first.sequence, second.sequence) == (1, 2)
        assert len(log) == 2

    def test_already_sequenced_event_kept(self):
        log = InMemoryEventLog()

        recorded = log.append(_transfer().with_sequence(17))

        assert recorded.sequence == 17

    def test_stream_filters_by_token(self):
        log = InMemoryEventLog()
        log.append(_transfer("0xone", 1))
        log.append(_transfer("0xtwo", 2))
        log.append(_transfer("0xone", 3))

        assert [e.amount for e in log.stream("0xone")] == [1, 3]
        assert list(log.stream("0xnone")) == []

    def test_by_type(self):
        log = InMemoryEventLog()
        log.append(_transfer("0xone"))
        log.append(TokensBurned(token="0xone", holder="0xa", amount=1))
        log.append(TokensBurned(token="0xtwo", holder="0xa", amount=1))

        assert len(log.by_type("TokensBurned")) == 2
        assert len(log.by_type("TokensBurned", token="0xtwo")) == 1

    def test_events_is_a_copy(self):
        log = InMemoryEventLog()
        log.append(_transfer())

        log.events.clear()

        assert len(log) == 1

    def test_append_batch_consecutive_sequences(self):
        log = InMemoryEventLog()
        log.append(_transfer())

        batch = log.append_batch([_transfer(amount=2), _transfer(amount=3)])

        assert [e.sequence for e in batch] == [2, 3]
        assert [e.amount for e in log.events] == [1, 2, 3]

    def test_discard_removes_batch(self):
        log = InMemoryEventLog()
        kept = log.append(_transfer())
        batch = log.append_batch([_transfer(amount=2), _transfer(amount=3)])

        log.discard(batch)

        assert log.events == [kept]


# =============================================================================
# LOGGING
# =============================================================================


class TestLoggingEventLog:
    def test_writes_json_line(self, captured):
        log = LoggingEventLog()

        recorded = log.append(_transfer(amount=9))

        assert recorded.sequence == 1
        assert len(captured) == 1
        payload = json.loads(captured[0]["message"])
        assert payload["event_type"] == "Transfer"
        assert payload["amount"] == 9
        assert payload["sequence"] == 1

    def test_level(self, captured):
        LoggingEventLog(level="WARNING").append(_transfer())

        assert captured[0]["level"].name == "WARNING"

    def test_cannot_stream(self):
        log = LoggingEventLog()
        log.append(_transfer())

        assert list(log.stream("0xtoken")) == []

    def test_discard_writes_rollback_record(self, captured):
        log = LoggingEventLog()
        batch = log.append_batch([_transfer(), _transfer()])

        log.discard(batch)

        assert len(captured) == 3
        assert json.loads(captured[-1]["message"]) == {"rolled_back": [1, 2]}


# =============================================================================
# COMPOSITE
# =============================================================================


class TestCompositeEventLog:
    def test_same_sequence_everywhere(self, captured):
        memory = InMemoryEventLog()
        composite = CompositeEventLog([LoggingEventLog(), memory, None])

        composite.append(_transfer())
        composite.append(_transfer())

        assert [e.sequence for e in memory.events] == [1, 2]
        assert [json.loads(r["message"])["sequence"] for r in captured] == [1, 2]

    def test_stream_from_first_non_empty_backend(self):
        memory = InMemoryEventLog()
        composite = CompositeEventLog([LoggingEventLog(), memory])
        composite.append(_transfer("0xone"))

        assert len(list(composite.stream("0xone"))) == 1
        assert list(composite.stream("0xtwo")) == []

    def test_failing_backend_rolls_back_written_ones(self, captured):
        """Сбой третьего backend: записавшие получают discard, исключение пробрасывается"""
        memory = InMemoryEventLog()
        broken = BrokenEventLog()
        composite = CompositeEventLog([memory, LoggingEventLog(), broken])
        composite.append(_transfer())
        broken.armed = True

        with pytest.raises(IOError):
            composite.append_batch([_transfer(amount=2), _transfer(amount=3)])

        assert [e.amount for e in memory.events] == [1]
        assert json.loads(captured[-1]["message"]) == {"rolled_back": [2, 3]}

    def test_failing_first_backend_writes_nothing(self):
        memory = InMemoryEventLog()
        broken = BrokenEventLog()
        broken.armed = True
        composite = CompositeEventLog([broken, memory])

        with pytest.raises(IOError):
            composite.append(_transfer())

        assert len(memory) == 0


# =============================================================================
# LOGGER CONFIG
# =============================================================================


class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def reset_flag(self, monkeypatch):
        monkeypatch.setattr(logger_module, "_LOGGER_CONFIGURED", False)

    def test_file_sink(self, tmp_path):
        log_file = tmp_path / "engine.log"

        configure_logging(LogConfig(level="DEBUG", sink=str(log_file)))
        logger.info("hello from test")
        logger.complete()

        assert logger_module._LOGGER_CONFIGURED is True
        assert "hello from test" in log_file.read_text(encoding="utf-8")

    def test_configured_once(self, tmp_path):
        first = tmp_path / "first.log"
        second = tmp_path / "second.log"

        configure_logging(LogConfig(sink=str(first)))
        configure_logging(LogConfig(sink=str(second)))
        logger.info("only first")
        logger.complete()

        assert "only first" in first.read_text(encoding="utf-8")
        assert not second.exists()

    def test_force_reconfigures(self, tmp_path):
        first = tmp_path / "first.log"
        second = tmp_path / "second.log"

        configure_logging(LogConfig(sink=str(first)))
        configure_logging(LogConfig(sink=str(second)), force=True)
        logger.info("after force")
        logger.complete()

        assert "after force" in second.read_text(encoding="utf-8")
        assert "after force" not in first.read_text(encoding="utf-8")
