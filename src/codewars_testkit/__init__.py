# Lightweight package init: avoid eager imports that can fail at console start.
__all__ = ["CodewarsFormatter", "NamePrettifier", "TestRunner", "testdox"]

def __getattr__(name):
    if name == "CodewarsFormatter":
        from .reporters.codewars import CodewarsFormatter as _CodewarsFormatter
        return _CodewarsFormatter
    if name == "NamePrettifier":
        from .prettifier import NamePrettifier as _NamePrettifier
        return _NamePrettifier
    if name == "testdox":
        from .prettifier import testdox as _testdox
        return _testdox
    if name == "TestRunner":
        from .runners.runner import TestRunner as _TestRunner
        return _TestRunner
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
