"""Assertions that describe their failures to listeners.

Comparison failures carry both operands so a reporter can show an
``Expected``/``Actual`` block. Containers are pre-rendered with ``pprint``;
scalars are left for the reporter to render.
"""
import pprint
from typing import Any

from .events import (
    ComparisonFailure,
    ExpectationFailedError,
    IncompleteTestError,
    RiskyTestError,
    SkippedTestError,
)

_SCALARS = (type(None), bool, int, float, str, bytes)


def _render(value: Any) -> str:
    if isinstance(value, _SCALARS):
        return ""
    return pprint.pformat(value)


def _fail(expected: Any, actual: Any, message: str, description: str) -> None:
    comparison = ComparisonFailure(expected, actual, _render(expected), _render(actual), description)
    prefix = f"{message}\n" if message else ""
    raise ExpectationFailedError(prefix + description, comparison)


def assert_equals(expected: Any, actual: Any, message: str = "") -> None:
    if expected != actual:
        _fail(expected, actual, message, "Failed asserting that two values are equal.")


def assert_same(expected: Any, actual: Any, message: str = "") -> None:
    if expected is not actual:
        _fail(expected, actual, message, "Failed asserting that two variables reference the same object.")


def assert_true(condition: Any, message: str = "") -> None:
    if condition is not True:
        _fail(True, condition, message, "Failed asserting that value is true.")


def assert_false(condition: Any, message: str = "") -> None:
    if condition is not False:
        _fail(False, condition, message, "Failed asserting that value is false.")


def mark_incomplete(message: str = "") -> None:
    raise IncompleteTestError(message)


def mark_skipped(message: str = "") -> None:
    raise SkippedTestError(message)


def mark_risky(message: str = "") -> None:
    raise RiskyTestError(message)
