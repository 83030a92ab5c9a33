import pytest

from oomangle import java
from oomangle.mangle import ManglingSession
from oomangle.types_ import ClassType, PointerType


@pytest.fixture
def ctx():
    return java.java_context()


@pytest.fixture
def session(ctx):
    return ManglingSession(ctx)


def class_ptr(name: str) -> PointerType:
    return PointerType(ClassType(name))
