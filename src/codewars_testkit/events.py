"""Contract between a test execution engine and its listeners.

A listener receives the lifecycle of a run in strict nesting order::

    start_suite -> start_test -> add_* ... -> end_test -> ... -> end_suite

and finally ``print_result``. Failures reach listeners as exceptions; the
types below let an engine describe what kind of failure it saw.
"""
from __future__ import annotations

import difflib
import warnings
from dataclasses import dataclass
from typing import Any, List, Optional, Protocol, Tuple, runtime_checkable

from .utils.stacktrace import extract_frames, previous_of


class Named(Protocol):
    name: str


@runtime_checkable
class TitledTest(Protocol):
    """A leaf test whose title is derived from its name or an explicit testdox."""

    name: str
    testdox: Optional[str]


class Listener(Protocol):
    def start_suite(self, suite: Named) -> None: ...
    def end_suite(self, suite: Named) -> None: ...
    def start_test(self, test: Named) -> None: ...
    def end_test(self, test: Named, time: float) -> None: ...
    def add_error(self, test: Named, exc: BaseException, time: float) -> None: ...
    def add_warning(self, test: Named, warning: TestWarning, time: float) -> None: ...
    def add_failure(self, test: Named, exc: AssertionError, time: float) -> None: ...
    def add_incomplete_test(self, test: Named, exc: BaseException, time: float) -> None: ...
    def add_risky_test(self, test: Named, exc: BaseException, time: float) -> None: ...
    def add_skipped_test(self, test: Named, exc: BaseException, time: float) -> None: ...
    def print_result(self, result: Any) -> None: ...


@dataclass
class ComparisonFailure:
    expected: Any
    actual: Any
    expected_as_string: str = ""
    actual_as_string: str = ""
    message: str = ""

    def diff(self) -> str:
        if not self.expected_as_string and not self.actual_as_string:
            return ""
        lines = difflib.unified_diff(
            self.expected_as_string.splitlines(), self.actual_as_string.splitlines(),
            "Expected", "Actual", lineterm="",
        )
        return "\n" + "\n".join(lines)


class ExpectationFailedError(AssertionError):
    """An assertion that compared two values and found them different."""

    def __init__(self, message: str = "", comparison_failure: Optional[ComparisonFailure] = None):
        super().__init__(message)
        self.comparison_failure = comparison_failure


class IncompleteTestError(Exception):
    pass


class SkippedTestError(Exception):
    pass


class RiskyTestError(Exception):
    pass


class ExceptionWrapper(Exception):
    """Snapshot of an unexpected exception raised by a test.

    Keeps the original class name, message and frames, and wraps the
    cause chain the same way, so the exception can be rendered after the
    test's frames are gone.
    """

    def __init__(self, exc: BaseException, _seen: Optional[set] = None):
        super().__init__(str(exc))
        self.class_name = type(exc).__qualname__
        self.message = str(exc)
        self.original = exc
        self.trace: List[Tuple[str, int]] = extract_frames(exc)

        seen = _seen if _seen is not None else set()
        seen.add(id(exc))
        previous = previous_of(exc)
        if previous is not None and id(previous) not in seen:
            self.previous_wrapped: Optional[ExceptionWrapper] = ExceptionWrapper(previous, seen)
        else:
            self.previous_wrapped = None


class TestWarning(Exception):
    """A warning emitted while a test ran."""

    __test__ = False

    def __init__(self, message: str, trace: Optional[List[Tuple[str, int]]] = None):
        super().__init__(message)
        self.trace = trace or []

    @classmethod
    def from_record(cls, record: warnings.WarningMessage) -> "TestWarning":
        category = record.category.__name__ if record.category else "Warning"
        return cls(f"{category}: {record.message}", [(record.filename, record.lineno)])
