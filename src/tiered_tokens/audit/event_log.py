"""
Event Log — Журнал событий аудита

Append-only журнал с глобальным sequence. События одной операции
записываются пачкой (append_batch): пачка попадает в журнал целиком
или не попадает вовсе.

Backends:
- InMemoryEventLog  — потокобезопасное хранилище (тесты, один процесс)
- LoggingEventLog   — JSON-строки через loguru (audit=True)
- CompositeEventLog — tee в несколько backends; при сбое одного
                      пачка отзывается из уже записавших (discard)
"""

import itertools
import json
import threading
from typing import Iterable, List, Optional, Protocol, Sequence, runtime_checkable

from loguru import logger

from tiered_tokens.core.domain.events import TokenEvent


# =============================================================================
# PORT
# =============================================================================


@runtime_checkable
class EventLogPort(Protocol):
    """
    Порт журнала событий.

    Событие с sequence == 0 получает следующий глобальный номер; событие
    с уже присвоенным sequence (например, от CompositeEventLog)
    сохраняется как есть.
    """

    def append(self, event: TokenEvent) -> TokenEvent:
        """Запись одного события."""

    def append_batch(self, events: Sequence[TokenEvent]) -> List[TokenEvent]:
        """Запись пачки всё-или-ничего; номера в пачке идут подряд."""

    def discard(self, events: Sequence[TokenEvent]) -> None:
        """Отзыв ранее записанной пачки (компенсация неудачного tee)."""

    def stream(self, token: str) -> Iterable[TokenEvent]:
        """События одного токена в порядке записи."""

    def close(self) -> None:
        """Освобождение ресурсов (опционально)."""


class _Sequencer:
    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def stamp(self, events: Sequence[TokenEvent]) -> List[TokenEvent]:
        with self._lock:
            return [e if e.sequence else e.with_sequence(next(self._counter)) for e in events]


# =============================================================================
# BACKENDS
# =============================================================================


class InMemoryEventLog(EventLogPort):
    """Потокобезопасный журнал в памяти."""

    def __init__(self) -> None:
        self._events: List[TokenEvent] = []
        self._lock = threading.Lock()
        self._sequencer = _Sequencer()

    def append(self, event: TokenEvent) -> TokenEvent:
        return self.append_batch([event])[0]

    def append_batch(self, events: Sequence[TokenEvent]) -> List[TokenEvent]:
        with self._lock:
            recorded = self._sequencer.stamp(events)
            self._events.extend(recorded)
        return recorded

    def discard(self, events: Sequence[TokenEvent]) -> None:
        sequences = {e.sequence for e in events}
        with self._lock:
            self._events = [e for e in self._events if e.sequence not in sequences]

    def stream(self, token: str) -> Iterable[TokenEvent]:
        return iter([e for e in self.events if e.token == token])

    def by_type(self, event_type: str, token: Optional[str] = None) -> List[TokenEvent]:
        return [
            e
            for e in self.events
            if e.event_type == event_type and (token is None or e.token == token)
        ]

    @property
    def events(self) -> List[TokenEvent]:
        with self._lock:
            return list(self._events)

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def close(self) -> None:
        return None


class LoggingEventLog(EventLogPort):
    """
    События как JSON-строки через loguru.

    Записи помечены audit=True, чтобы отдельный sink мог их отфильтровать.
    Поток логов нельзя переписать, поэтому discard пишет компенсирующую
    запись {"rolled_back": [sequence, ...]}.
    """

    def __init__(self, level: str = "INFO") -> None:
        self._level = level
        self._sequencer = _Sequencer()
        self._logger = logger.bind(audit=True)

    def append(self, event: TokenEvent) -> TokenEvent:
        return self.append_batch([event])[0]

    def append_batch(self, events: Sequence[TokenEvent]) -> List[TokenEvent]:
        recorded = self._sequencer.stamp(events)
        for event in recorded:
            self._logger.log(self._level, event.model_dump_json())
        return recorded

    def discard(self, events: Sequence[TokenEvent]) -> None:
        payload = {"rolled_back": [e.sequence for e in events]}
        self._logger.log(self._level, json.dumps(payload))

    def stream(self, token: str) -> Iterable[TokenEvent]:
        # ретроспективное чтение недоступно
        return iter(())

    def close(self) -> None:
        return None


class CompositeEventLog(EventLogPort):
    """
    Tee в несколько backends.

    sequence присваивается один раз, поэтому во всех backends номера
    совпадают. Если backend падает на пачке, backends, уже записавшие её,
    получают discard, и исключение пробрасывается. Чтение обслуживает
    первый backend, в котором есть события.
    """

    def __init__(self, backends: List[EventLogPort]):
        self._backends = [b for b in backends if b is not None]
        self._sequencer = _Sequencer()

    def append(self, event: TokenEvent) -> TokenEvent:
        return self.append_batch([event])[0]

    def append_batch(self, events: Sequence[TokenEvent]) -> List[TokenEvent]:
        recorded = self._sequencer.stamp(events)
        written: List[EventLogPort] = []
        try:
            for backend in self._backends:
                backend.append_batch(recorded)
                written.append(backend)
        except BaseException:
            for backend in reversed(written):
                backend.discard(recorded)
            raise
        return recorded

    def discard(self, events: Sequence[TokenEvent]) -> None:
        for backend in self._backends:
            backend.discard(events)

    def stream(self, token: str) -> Iterable[TokenEvent]:
        for backend in self._backends:
            events = list(backend.stream(token))
            if events:
                return iter(events)
        return iter(())

    def close(self) -> None:
        for backend in self._backends:
            backend.close()
