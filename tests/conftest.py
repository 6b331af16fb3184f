import pathlib

import pytest

SUITES_DIR = pathlib.Path(__file__).parent / "suites"


@pytest.fixture
def calculator_suite() -> str:
    return str(SUITES_DIR / "calculator_suite.py")


@pytest.fixture
def listed_suite() -> str:
    return str(SUITES_DIR / "listed_suite.py")


@pytest.fixture
def inherited_suite() -> str:
    return str(SUITES_DIR / "inherited_suite.py")
