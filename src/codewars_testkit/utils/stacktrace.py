import pathlib
import traceback
from typing import List, Optional, Tuple

Frame = Tuple[str, int]

# Frames from inside the testkit itself are noise for whoever reads a trace.
_PACKAGE_DIR = pathlib.Path(__file__).resolve().parent.parent


def extract_frames(exc: BaseException) -> List[Frame]:
    return [(f.filename, f.lineno or 0) for f in traceback.extract_tb(exc.__traceback__)]


def _is_filtered(filename: str) -> bool:
    try:
        path = pathlib.Path(filename).resolve()
    except (OSError, ValueError):
        return False
    return path == _PACKAGE_DIR or _PACKAGE_DIR in path.parents


def filtered_stacktrace(exc: BaseException) -> str:
    """One ``file:line`` line per frame, testkit frames removed.

    Wrapped exceptions and warnings carry a ``trace`` snapshot; plain
    exceptions are read from their live traceback.
    """
    if not isinstance(exc, BaseException):
        raise TypeError(f"expected an exception, got {type(exc).__name__}")
    frames = getattr(exc, "trace", None)
    if frames is None:
        frames = extract_frames(exc)
    return "".join(f"{filename}:{lineno}\n" for filename, lineno in frames if not _is_filtered(filename))


def previous_of(exc: BaseException) -> Optional[BaseException]:
    if hasattr(exc, "previous_wrapped"):
        return exc.previous_wrapped
    if exc.__cause__ is not None:
        return exc.__cause__
    if exc.__suppress_context__:
        return None
    return exc.__context__


def exception_to_string(exc: BaseException) -> str:
    from ..events import ExceptionWrapper, ExpectationFailedError

    if isinstance(exc, AssertionError):
        buffer = str(exc)
        if isinstance(exc, ExpectationFailedError) and exc.comparison_failure is not None:
            buffer += exc.comparison_failure.diff()
        return buffer.strip() + "\n" if buffer else buffer
    if isinstance(exc, ExceptionWrapper):
        return f"{exc.class_name}: {exc.message}\n"
    return f"{type(exc).__qualname__}: {exc}\n"


def get_details(exc: BaseException) -> str:
    """Filtered trace of ``exc`` followed by a ``Caused by`` section per cause."""
    stack_trace = filtered_stacktrace(exc)
    seen = {id(exc)}
    previous = previous_of(exc)
    while previous is not None and id(previous) not in seen:
        seen.add(id(previous))
        stack_trace += "\nCaused by\n" + exception_to_string(previous) + "\n" + filtered_stacktrace(previous)
        previous = previous_of(previous)
    return " " + stack_trace.replace("\n", "\n ")
