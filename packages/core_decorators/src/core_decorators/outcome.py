"""Tagged result of invoking an operation: settled now, or settling later."""
from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Union


@dataclass(frozen=True)
class Immediate:
    value: Any


@dataclass(frozen=True)
class Deferred:
    awaitable: Awaitable[Any]


Outcome = Union[Immediate, Deferred]


def classify(result: Any) -> Outcome:
    if inspect.isawaitable(result):
        return Deferred(result)
    return Immediate(result)
