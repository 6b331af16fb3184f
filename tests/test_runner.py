"""
Tests for the test runner that drives listeners.

Runs the fixture modules in tests/suites/ and checks both the events fired
and the Codewars output they produce.
"""

import dataclasses
import io
import sys

import pytest

from codewars_testkit.config import AppConfig
from codewars_testkit.events import ExceptionWrapper, ExpectationFailedError, TestWarning
from codewars_testkit.reporters.codewars import CodewarsFormatter
from codewars_testkit.runners.runner import TestCase, TestRunner, TestSuite


class Recorder:
    """Listener that keeps every event it receives."""

    def __init__(self):
        self.events = []

    def __getattr__(self, event):
        def record(*args):
            self.events.append((event,) + args)
        return record

    def names(self):
        return [e[0] for e in self.events]

    def of(self, event):
        return [e for e in self.events if e[0] == event]


@pytest.fixture
def recorder():
    return Recorder()


class TestDiscovery:
    def test_classes_become_named_suites(self, calculator_suite):
        suite = TestRunner().discover(calculator_suite)

        assert suite.name == ""
        assert isinstance(suite.tests[0], TestCase)
        assert suite.tests[0].name == "test_module_level_function"
        class_suite = suite.tests[1]
        assert isinstance(class_suite, TestSuite)
        assert class_suite.name == "CalculatorTest"
        assert [t.name for t in class_suite.tests][:2] == ["testAddsTwoNumbers", "testReportsWrongSum"]

    def test_imported_and_helper_functions_are_ignored(self, calculator_suite):
        ids = [tc.id for tc in TestRunner().discover(calculator_suite).cases()]

        assert len(ids) == 9
        assert not any("helper" in i or "assert_equals" in i for i in ids)

    def test_module_discover_function_is_used(self, listed_suite):
        cases = list(TestRunner().discover(listed_suite).cases())
        assert [c.id for c in cases] == ["listed.first"]

    def test_unknown_module_raises(self):
        with pytest.raises(ImportError):
            TestRunner().discover("codewars_testkit_no_such_module")


class TestRun:
    def test_events_nest_in_order(self, calculator_suite, recorder):
        TestRunner(listeners=[recorder]).run(calculator_suite)
        names = recorder.names()

        assert names[:4] == ["start_suite", "start_suite", "start_test", "end_test"]
        assert names[-3:] == ["end_suite", "end_suite", "print_result"]
        assert names.count("start_suite") == names.count("end_suite") == 3
        assert names.count("start_test") == names.count("end_test") == 9

    def test_outcomes_are_classified(self, calculator_suite, recorder):
        result = TestRunner(listeners=[recorder]).run(calculator_suite)

        (_, _, failure, _), = recorder.of("add_failure")
        assert isinstance(failure, ExpectationFailedError)
        (_, _, error, _), = recorder.of("add_error")
        assert isinstance(error, ExceptionWrapper)
        assert error.class_name == "ValueError"
        assert error.previous_wrapped.class_name == "KeyError"
        (_, _, warning, _), = recorder.of("add_warning")
        assert isinstance(warning, TestWarning)
        assert str(warning) == "UserWarning: careful"
        assert len(recorder.of("add_skipped_test")) == 1
        assert len(recorder.of("add_incomplete_test")) == 1
        assert len(recorder.of("add_risky_test")) == 1

        assert (result.passed, result.failed, result.errored) == (3, 1, 1)
        assert (result.skipped, result.incomplete, result.risky) == (1, 1, 1)
        assert not result.successful

    def test_elapsed_time_is_reported(self, calculator_suite, recorder):
        TestRunner(listeners=[recorder]).run(calculator_suite)
        for _, _, elapsed in recorder.of("end_test"):
            assert elapsed >= 0.0

    def test_output_is_captured_per_test(self, calculator_suite, recorder, capsys):
        TestRunner(listeners=[recorder]).run(calculator_suite)

        printing = [e[1] for e in recorder.of("end_test") if e[1].name == "testPrintsOutput"][0]
        assert printing.get_actual_output() == "hello from the test\n"
        assert "hello from the test" not in capsys.readouterr().out

    def test_output_capture_can_be_disabled(self, calculator_suite, recorder, capsys):
        cfg = AppConfig.model_validate({"runner": {"capture_output": False}})
        TestRunner(cfg, [recorder]).run(calculator_suite)

        assert "hello from the test" in capsys.readouterr().out

    def test_warnings_can_be_ignored(self, calculator_suite, recorder):
        cfg = AppConfig.model_validate({"runner": {"convert_warnings": False}})
        result = TestRunner(cfg, [recorder]).run(calculator_suite)

        assert recorder.of("add_warning") == []
        assert result.passed == 4


def test_codewars_output_for_a_run(calculator_suite):
    out = io.StringIO()
    TestRunner(listeners=[CodewarsFormatter(out)]).run(calculator_suite)
    output = out.getvalue()

    assert output.startswith("\n<IT::>module level function\n\n<PASSED::>Test Passed\n")
    assert "\n<DESCRIBE::>Calculator\n" in output
    assert "\n<IT::>adds two numbers\n\n<PASSED::>Test Passed\n" in output
    assert (
        "<FAILED::>Failed asserting that two values are equal.<:LF:>Expected: 4<:LF:>Actual  : 3\n"
        in output
    )
    assert "\n<IT::>prints output\nhello from the test\n\n<PASSED::>Test Passed\n" in output
    assert "\n<ERROR::>ValueError : lookup failed\n" in output
    assert "Caused by<:LF:> KeyError: 'missing'" in output
    assert "\n<LOG::>Test Ignored\n" in output
    assert "\n<LOG::>Test Incomplete\n" in output
    assert "\n<ERROR::>no assertions\n" in output
    assert "\n<ERROR::>UserWarning: careful\n" in output
    assert output.count("<DESCRIBE::>") == 1
    assert output.endswith("\n<COMPLETEDIN::>\n")


class TestClassBasedSuites:
    """Inherited tests and unittest.TestCase fixtures."""

    def test_inherited_methods_are_discovered_base_first(self, inherited_suite):
        class_suite = TestRunner().discover(inherited_suite).tests[0]

        assert class_suite.name == "FooTest"
        assert [t.name for t in class_suite.tests] == [
            "testInherited",
            "testUsesSetUp",
            "testFailsWithUnittestAssertion",
        ]

    def test_unittest_fixtures_run(self, inherited_suite, recorder):
        runner = TestRunner(listeners=[recorder])
        result = runner.run(inherited_suite)

        assert recorder.of("add_error") == []
        assert (result.passed, result.failed) == (2, 1)
        torn_down = runner.load(inherited_suite).torn_down
        assert {"testInherited", "testUsesSetUp", "testFailsWithUnittestAssertion"} <= set(torn_down)

    def test_codewars_output_includes_inherited_test(self, inherited_suite):
        out = io.StringIO()
        TestRunner(listeners=[CodewarsFormatter(out)]).run(inherited_suite)
        output = out.getvalue()

        assert "\n<DESCRIBE::>Foo\n" in output
        assert "\n<IT::>inherited\n\n<PASSED::>Test Passed\n" in output
        assert "\n<IT::>uses set up\n\n<PASSED::>Test Passed\n" in output
        assert "<FAILED::>1 != 2" in output


class TestLoading:
    """Loading test modules from file paths."""

    def test_file_named_like_a_stdlib_module_does_not_shadow_it(self, tmp_path):
        import json

        target = tmp_path / "json.py"
        target.write_text("def test_shadowing():\n    pass\n")

        suite = TestRunner().discover(str(target))

        assert sys.modules["json"] is json
        assert [tc.id for tc in suite.cases()] == ["json.test_shadowing"]

    def test_broken_module_is_not_left_registered(self, tmp_path):
        target = tmp_path / "broken_suite.py"
        target.write_text("raise RuntimeError('cannot import me')\n")

        with pytest.raises(ImportError, match="cannot import me"):
            TestRunner().discover(str(target))

        assert not any("broken_suite" in name for name in sys.modules)

    def test_same_file_is_loaded_once(self, calculator_suite):
        runner = TestRunner()
        assert runner.load(calculator_suite) is runner.load(calculator_suite)


def test_case_result_holds_counters_and_time(calculator_suite):
    result = TestRunner().run(calculator_suite)
    fields = {f.name for f in dataclasses.fields(result.cases[0])}

    assert fields == {"id", "passed", "failed", "errored", "skipped", "incomplete", "risky", "warnings", "time"}
