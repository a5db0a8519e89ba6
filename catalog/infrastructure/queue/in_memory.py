"""
Publishers en memoria para tests y desarrollo local.

Guardan todo lo publicado; opcionalmente lo entregan directo a un consumidor
para imitar un broker que entrega in-process.
"""

from __future__ import annotations

import threading
from typing import Callable, Generic, List, Optional, TypeVar

from ...domain.audit import AuditWorkItem
from ...domain.events import IntegrationEvent

T = TypeVar("T")


class _InMemoryPublisher(Generic[T]):
    def __init__(self, deliver: Optional[Callable[[T], object]] = None) -> None:
        self._deliver = deliver
        self._published: List[T] = []
        self._lock = threading.Lock()

    def publish(self, message: T) -> None:
        with self._lock:
            self._published.append(message)
        if self._deliver is not None:
            self._deliver(message)

    @property
    def published(self) -> List[T]:
        with self._lock:
            return list(self._published)

    def clear(self) -> None:
        with self._lock:
            self._published.clear()


class InMemoryAuditPublisher(_InMemoryPublisher[AuditWorkItem]):
    pass


class InMemoryIntegrationEventPublisher(_InMemoryPublisher[IntegrationEvent]):
    pass
