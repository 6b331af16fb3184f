from dataclasses import dataclass
from typing import List, Callable, Iterable, Iterator, Optional, Union
import contextlib
import hashlib
import importlib
import importlib.util
import inspect
import io
import pathlib
import sys
import time
import unittest
import warnings
from ..config import AppConfig
from ..events import (
    ExceptionWrapper,
    IncompleteTestError,
    Listener,
    RiskyTestError,
    SkippedTestError,
    TestWarning,
)
from ..logging import setup_logging

@dataclass
class TestCaseResult:
    __test__ = False
    id: str
    passed: int = 0
    failed: int = 0
    errored: int = 0
    skipped: int = 0
    incomplete: int = 0
    risky: int = 0
    warnings: int = 0
    time: float = 0.0

@dataclass
class SuiteResult:
    suite: str
    cases: List[TestCaseResult]
    @property
    def passed(self) -> int: return sum(c.passed for c in self.cases)
    @property
    def failed(self) -> int: return sum(c.failed for c in self.cases)
    @property
    def errored(self) -> int: return sum(c.errored for c in self.cases)
    @property
    def skipped(self) -> int: return sum(c.skipped for c in self.cases)
    @property
    def incomplete(self) -> int: return sum(c.incomplete for c in self.cases)
    @property
    def risky(self) -> int: return sum(c.risky for c in self.cases)
    @property
    def successful(self) -> bool: return self.failed == 0 and self.errored == 0

class TestCase:
    __test__ = False
    def __init__(self, id: str, func: Callable[[], None], name: Optional[str] = None, testdox: Optional[str] = None):
        self.id = id
        self.func = func
        self.name = name or id.rsplit(".", 1)[-1]
        self.testdox = testdox if testdox is not None else getattr(func, "testdox", None)
        self.output = ""
    def has_output(self) -> bool:
        return self.output != ""
    def get_actual_output(self) -> str:
        return self.output
    def run(self):
        return self.func()
    def __repr__(self) -> str:
        return f"TestCase({self.id!r})"

class TestSuite:
    __test__ = False
    def __init__(self, name: str, tests: Iterable[Union["TestSuite", TestCase]] = ()):
        self.name = name
        self.tests: List[Union[TestSuite, TestCase]] = list(tests)
    def add(self, test: Union["TestSuite", TestCase]) -> None:
        self.tests.append(test)
    def cases(self) -> Iterator[TestCase]:
        for t in self.tests:
            if isinstance(t, TestSuite):
                yield from t.cases()
            else:
                yield t
    def __repr__(self) -> str:
        return f"TestSuite({self.name!r}, {len(self.tests)} tests)"

def _is_test_class(name: str, obj) -> bool:
    return inspect.isclass(obj) and (name.endswith("Test") or name.startswith("Test"))

def _test_methods(cls: type) -> List[str]:
    # base classes first, each in definition order
    names: List[str] = []
    for klass in reversed(cls.__mro__):
        for m, v in vars(klass).items():
            if m.startswith("test") and callable(v) and m not in names:
                names.append(m)
    return names

def _method_case(module_name: str, cls: type, method_name: str) -> TestCase:
    method = getattr(cls, method_name)
    def run_method():
        # fresh instance per test, like xUnit fixtures
        instance = cls(method_name) if issubclass(cls, unittest.TestCase) else cls()
        set_up = getattr(instance, "set_up", None) or getattr(instance, "setUp", None)
        tear_down = getattr(instance, "tear_down", None) or getattr(instance, "tearDown", None)
        if set_up: set_up()
        try:
            getattr(instance, method_name)()
        finally:
            if tear_down: tear_down()
    return TestCase(f"{module_name}.{cls.__name__}.{method_name}", run_method, name=method_name,
                    testdox=getattr(method, "testdox", None))

class TestRunner:
    __test__ = False
    def __init__(self, cfg: Optional[AppConfig] = None, listeners: Iterable[Listener] = ()):
        self.cfg = cfg or AppConfig()
        self.listeners: List[Listener] = list(listeners)
        self.log = setup_logging(self.cfg.log_level)

    def _fire(self, event: str, *args) -> None:
        for listener in self.listeners:
            getattr(listener, event)(*args)

    def load(self, target: str):
        if target.endswith(".py"):
            path = pathlib.Path(target).resolve()
            # private name, so a file called json.py cannot shadow the real json
            digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:8]
            name = f"_codewars_target_{path.stem}_{digest}"
            if name in sys.modules:
                return sys.modules[name]
            spec = importlib.util.spec_from_file_location(name, path)
            if spec is None or spec.loader is None:
                raise ImportError(f"cannot load tests from {target}")
            mod = importlib.util.module_from_spec(spec)
            sys.modules[name] = mod
            try:
                spec.loader.exec_module(mod)
            except Exception as e:
                sys.modules.pop(name, None)
                raise ImportError(f"cannot load tests from {target}: {e}") from e
            return mod
        return importlib.import_module(target)

    def discover(self, target: str) -> TestSuite:
        mod = self.load(target)
        module_name = mod.__name__
        label = pathlib.Path(target).stem if target.endswith(".py") else module_name
        # the module itself is only a grouping, its suite stays unnamed
        suite = TestSuite("")
        if hasattr(mod, "discover"):
            for tc in getattr(mod, "discover")():
                suite.add(tc)
            return suite

        for name, obj in vars(mod).items():
            if getattr(obj, "__module__", None) != module_name:
                continue
            if inspect.isfunction(obj) and name.startswith("test"):
                suite.add(TestCase(f"{label}.{name}", obj, name=name))
            elif _is_test_class(name, obj):
                suite.add(TestSuite(name, [_method_case(label, obj, m) for m in _test_methods(obj)]))
        self.log.debug("Discovered %d tests in %s", sum(1 for _ in suite.cases()), target)
        return suite

    def run(self, *targets: str) -> SuiteResult:
        wrapper = TestSuite("", [self.discover(t) for t in targets])
        results: List[TestCaseResult] = []
        self._run_suite(wrapper, results)
        result = SuiteResult(suite=", ".join(targets), cases=results)
        self._fire("print_result", result)
        return result

    def _run_suite(self, suite: TestSuite, results: List[TestCaseResult]) -> None:
        self._fire("start_suite", suite)
        for t in suite.tests:
            if isinstance(t, TestSuite):
                self._run_suite(t, results)
            else:
                results.append(self._run_test(t))
        self._fire("end_suite", suite)

    def _run_test(self, tc: TestCase) -> TestCaseResult:
        self.log.debug("Running %s", tc.id)
        self._fire("start_test", tc)
        res = TestCaseResult(id=tc.id)
        outcome = None
        buffer = io.StringIO()
        start = time.perf_counter()
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            try:
                with contextlib.ExitStack() as stack:
                    if self.cfg.runner.capture_output:
                        stack.enter_context(contextlib.redirect_stdout(buffer))
                    tc.run()
            except (unittest.SkipTest, SkippedTestError) as e:
                res.skipped = 1
                outcome = ("add_skipped_test", e)
            except IncompleteTestError as e:
                res.incomplete = 1
                outcome = ("add_incomplete_test", e)
            except RiskyTestError as e:
                res.risky = 1
                outcome = ("add_risky_test", e)
            except AssertionError as e:
                res.failed = 1
                outcome = ("add_failure", e)
            except Exception as e:
                res.errored = 1
                outcome = ("add_error", ExceptionWrapper(e))
        res.time = time.perf_counter() - start
        tc.output = buffer.getvalue()

        if outcome is not None:
            event, exc = outcome
            self._fire(event, tc, exc, res.time)
        if self.cfg.runner.convert_warnings:
            for record in caught:
                res.warnings += 1
                self._fire("add_warning", tc, TestWarning.from_record(record), res.time)
        if outcome is None and res.warnings == 0:
            res.passed = 1
        self._fire("end_test", tc, res.time)
        return res
