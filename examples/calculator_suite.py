"""Run with: codewars-testkit run examples/calculator_suite.py -c examples/config.yaml"""
from codewars_testkit import testdox
from codewars_testkit.assertions import assert_equals, mark_incomplete


def add(a, b):
    return a + b


class CalculatorTest:
    def testAddsTwoNumbers(self):
        assert_equals(3, add(1, 2))

    def test_prints_its_work(self):
        print("1 + 1 = 2")
        assert_equals(2, add(1, 1))

    @testdox("adding lists concatenates them")
    def testListConcatenation(self):
        assert_equals([1, 2, 3], add([1], [2, 3]))

    def testDivision(self):
        mark_incomplete("division is not implemented yet")
