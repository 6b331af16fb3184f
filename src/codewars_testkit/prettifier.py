import re
from typing import Callable, Optional

_CAMEL_HUMP = re.compile(r"(?<=[a-z])(?=[A-Z])")


def testdox(title: str) -> Callable:
    """Give a test an explicit title instead of its prettified name."""
    def decorate(func):
        func.testdox = title
        return func
    return decorate


class NamePrettifier:
    """Turns programmatic test names into readable phrases."""

    def prettify_test_class(self, name: str) -> str:
        parts = name.split(".")
        class_name = parts.pop()

        if class_name.endswith("Test"):
            class_name = class_name[: -len("Test")]
        if class_name.startswith("Tests"):
            class_name = class_name[len("Tests"):]
        elif class_name.startswith("Test"):
            class_name = class_name[len("Test"):]
        if not class_name:
            class_name = "UnnamedTests"

        result = _CAMEL_HUMP.sub(" ", class_name)
        if parts:
            return f"{result} ({'.'.join(parts + [class_name])})"
        return result

    def prettify_test_method(self, name: str) -> str:
        if name.startswith("test_"):
            name = name[len("test_"):]
        elif name.startswith("test"):
            name = name[len("test"):]
        if not name:
            return ""

        name = name[0].lower() + name[1:]
        if "_" in name:
            return name.replace("_", " ").strip()

        buffer = []
        was_numeric = False
        for i, char in enumerate(name):
            if i > 0 and "A" <= char <= "Z":
                buffer.append(" " + char.lower())
                continue
            is_numeric = char.isdigit()
            if is_numeric and not was_numeric:
                buffer.append(" ")
            was_numeric = is_numeric
            buffer.append(char)
        return "".join(buffer).strip()

    def prettify_test_case(self, test) -> str:
        title: Optional[str] = getattr(test, "testdox", None)
        if title:
            return title
        return self.prettify_test_method(test.name)
