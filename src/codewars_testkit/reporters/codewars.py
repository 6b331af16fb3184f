"""Listener that writes run events in the Codewars output format.

Every event becomes a tagged line padded with newlines, for example::

    \\n<IT::>adds two numbers\\n

Failures are held back until the test ends so that anything the test
printed comes out before them.
"""
import logging
import math
import sys
from typing import Any, List, Optional, TextIO

from ..events import ComparisonFailure, ExceptionWrapper, ExpectationFailedError, Named, TestWarning, TitledTest
from ..prettifier import NamePrettifier
from ..utils.stacktrace import get_details

log = logging.getLogger("codewars_testkit.reporters.codewars")

LINE_FEED = "<:LF:>"


def escape_lf(text: str) -> str:
    return text.replace("\n", LINE_FEED)


def get_message(exc: BaseException) -> str:
    message = ""
    if isinstance(exc, ExceptionWrapper):
        if exc.class_name != "":
            message += exc.class_name
        if message != "" and exc.message != "":
            message += " : "
        return message + exc.message
    return message + str(exc)


def primitive_value_as_string(value: Any) -> Optional[str]:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NAN"
        if math.isinf(value):
            return "INF" if value > 0 else "-INF"
        if value.is_integer() and abs(value) < 1e15:
            return str(int(value))
        return repr(value)
    if isinstance(value, (int, str)):
        return str(value)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return None


def get_assertion_details(exc: ExpectationFailedError) -> str:
    comparison = exc.comparison_failure
    if not isinstance(comparison, ComparisonFailure):
        return ""

    expected = comparison.expected_as_string
    if not expected:
        expected = primitive_value_as_string(comparison.expected)
    actual = comparison.actual_as_string
    if not actual:
        actual = primitive_value_as_string(comparison.actual)

    if expected is not None and actual is not None:
        return f"\nExpected: {expected}\nActual  : {actual}"
    return ""


class CodewarsFormatter:
    def __init__(self, stream: Optional[TextIO] = None, prettifier: Optional[NamePrettifier] = None):
        self.stream = stream if stream is not None else sys.stdout
        self.prettifier = prettifier or NamePrettifier()
        self.wrapper_suite: Optional[Named] = None
        # Failures of the running test, printed after its own output.
        self.failures: List[str] = []

    def write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def add_error(self, test: Named, exc: BaseException, time: float) -> None:
        self.failures.append(f"\n<ERROR::>{get_message(exc)}\n")
        self.failures.append(f"\n<LOG::-Stacktrace>{escape_lf(get_details(exc))}\n")

    def add_warning(self, test: Named, warning: TestWarning, time: float) -> None:
        self.failures.append(f"\n<ERROR::>{get_message(warning)}\n")
        self.failures.append(f"\n<LOG::-Stacktrace>{escape_lf(get_details(warning))}\n")

    def add_failure(self, test: Named, exc: AssertionError, time: float) -> None:
        message = get_message(exc)
        if isinstance(exc, ExpectationFailedError):
            message += get_assertion_details(exc)
        self.failures.append(f"\n<FAILED::>{escape_lf(message)}\n")

    def add_incomplete_test(self, test: Named, exc: BaseException, time: float) -> None:
        self.write("\n<LOG::>Test Incomplete\n")

    def add_risky_test(self, test: Named, exc: BaseException, time: float) -> None:
        self.add_error(test, exc, time)

    def add_skipped_test(self, test: Named, exc: BaseException, time: float) -> None:
        self.write("\n<LOG::>Test Ignored\n")

    def start_suite(self, suite: Named) -> None:
        # The first suite only wraps the real ones.
        if self.wrapper_suite is None:
            log.debug("Wrapper suite %r", suite.name)
            self.wrapper_suite = suite
            return

        if not suite.name:
            return
        self.write(f"\n<DESCRIBE::>{self.prettifier.prettify_test_class(suite.name)}\n")

    def end_suite(self, suite: Named) -> None:
        if suite is self.wrapper_suite:
            self.wrapper_suite = None
            return

        if not suite.name:
            return
        self.write("\n<COMPLETEDIN::>\n")

    def start_test(self, test: Named) -> None:
        title = test.name
        if isinstance(test, TitledTest):
            title = self.prettifier.prettify_test_case(test)
        self.write(f"\n<IT::>{title}\n")
        self.failures = []

    def end_test(self, test: Named, time: float) -> None:
        if hasattr(test, "has_output") and hasattr(test, "get_actual_output"):
            if test.has_output():
                self.write(test.get_actual_output())

        if not self.failures:
            self.write("\n<PASSED::>Test Passed\n")
        else:
            self.write("\n".join(self.failures))
        self.write(f"\n<COMPLETEDIN::>{time * 1000:.4f}\n")

    def print_result(self, result: Any) -> None:
        pass
