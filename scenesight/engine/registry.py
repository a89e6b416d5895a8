"""Per-kind dispatch tables: every consumer registers one handler per PrimitiveKind.

Usage:
    _emitters = KindRegistry("svg")

    @_emitters.register(PrimitiveKind.CIRCLES)
    def _emit_circle(...):
        ...

    _emitters.check_exhaustive()   # at import time, after all registrations

Adding a kind to PrimitiveKind makes ``check_exhaustive`` fail in every
consumer that has not learned to handle it.
"""

from __future__ import annotations

import logging
from typing import Callable, Generic, TypeVar

from scenesight.models.scene import PrimitiveKind

logger = logging.getLogger(__name__)

HandlerT = TypeVar("HandlerT", bound=Callable)


class KindRegistry(Generic[HandlerT]):
    def __init__(self, name: str) -> None:
        self.name = name
        self._handlers: dict[PrimitiveKind, HandlerT] = {}

    def register(self, kind: PrimitiveKind) -> Callable[[HandlerT], HandlerT]:
        def decorator(fn: HandlerT) -> HandlerT:
            if kind in self._handlers:
                raise ValueError(f"Duplicate {self.name} handler for {kind.value}")
            self._handlers[kind] = fn
            logger.debug("Registered %s handler for %s", self.name, kind.value)
            return fn

        return decorator

    def get(self, kind: PrimitiveKind) -> HandlerT:
        return self._handlers[kind]

    def missing(self) -> set[PrimitiveKind]:
        return set(PrimitiveKind) - set(self._handlers)

    def check_exhaustive(self) -> None:
        missing = self.missing()
        if missing:
            names = sorted(k.value for k in missing)
            raise TypeError(f"{self.name} registry has no handler for: {names}")

    @property
    def count(self) -> int:
        return len(self._handlers)
