"""
Global conftest for the decorator tests.

This file combines:
1. A pretty unified-diff assertion helper for clearer dict-vs-dict failures.
2. An autouse fixture that resets the process-wide decorator context
   (configuration + correlation counter) around every test.
3. A recording logger that stands in for the structured logger so tests can
   assert on the exact ENTER/EXIT/ERROR calls.
"""

import json
import difflib
from typing import Any, List, Tuple

import pytest

from core_decorators import configure, default_context


# --------------------------------------------------------------------------- #
# Pretty diff for dict comparisons                                            #
# --------------------------------------------------------------------------- #
def pytest_assertrepr_compare(op, left, right):
    """Pretty unified-diff output when comparing two dicts with ==."""
    if isinstance(left, dict) and isinstance(right, dict) and op == "==":
        lhs = json.dumps(left, indent=2, sort_keys=True, default=repr).splitlines()
        rhs = json.dumps(right, indent=2, sort_keys=True, default=repr).splitlines()
        return [""] + list(
            difflib.unified_diff(lhs, rhs, fromfile="left", tofile="right")
        )


class RecordingLogger:
    """Captures (context, message, payload) triples per channel."""

    def __init__(self, name: str = "test") -> None:
        self.name = name
        self.debug_calls: List[Tuple[dict, str, Any]] = []
        self.error_calls: List[Tuple[dict, str, Any]] = []

    @staticmethod
    def _record(msg: str, args: tuple, kwargs: dict) -> Tuple[dict, str, Any]:
        extra = dict(kwargs.get("extra") or {})
        context = {"id": extra.pop("id", None)}
        return context, (msg % args if args else msg), {**extra, "exc_info": kwargs.get("exc_info")}

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.debug_calls.append(self._record(msg, args, kwargs))

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.error_calls.append(self._record(msg, args, kwargs))

    def debug_payloads(self) -> List[Tuple[int, str, str]]:
        """(id, message, payload) for every debug call, in order."""
        return [(ctx["id"], msg, rest["payload"]) for ctx, msg, rest in self.debug_calls]


@pytest.fixture(autouse=True)
def _reset_decorator_context():
    default_context.reset()
    yield
    default_context.reset()


@pytest.fixture
def recorder() -> RecordingLogger:
    """Route every logger built by decorate() to one RecordingLogger."""
    rec = RecordingLogger()
    configure(logger_factory=lambda name, config: rec)
    return rec
