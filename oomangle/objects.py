from __future__ import annotations

import enum

from oomangle import types_


class Allocation(enum.Enum):
    static = "static"
    instance = "instance"


class Entity:
    """Method or field"""

    def __init__(
        self,
        owner: types_.ClassType,
        name: str,
        type_: types_.Type,
        allocation: Allocation = Allocation.instance,
    ) -> None:
        self.owner = owner
        self.name = name
        self.type = type_
        self.allocation = allocation

    @property
    def plain_name(self) -> str:
        # "foo.(I)V" -> "foo"
        return self.name.split(".", 1)[0]

    @property
    def signature(self) -> str | None:
        _plain, sep, signature = self.name.partition(".")
        return signature if sep else None

    @property
    def static(self) -> bool:
        return self.allocation is Allocation.static

    @property
    def is_method(self) -> bool:
        return isinstance(self.type, types_.MethodType)

    def __repr__(self) -> str:
        return f"Entity({self.owner.name}::{self.name}, {self.allocation.value})"
