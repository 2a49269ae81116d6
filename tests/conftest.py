import pytest

from super_methods.src.super_methods.parser import JavaScriptParser


def lines(*parts: str) -> str:
    return "\n".join(parts)


@pytest.fixture(scope="session")
def js_parser() -> JavaScriptParser:
    return JavaScriptParser()
