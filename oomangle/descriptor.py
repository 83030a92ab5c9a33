"""Build mangler types from JVM field and method descriptors."""

from __future__ import annotations

from collections.abc import Iterator

from oomangle import java
from oomangle.objects import Allocation, Entity
from oomangle.source import DescriptorSyntaxError, Location
from oomangle.types_ import ClassType, MethodType, PointerType, Type


class _Chars(Iterator[str]):
    __slots__ = ("descriptor", "column", "_chars", "_peeked")

    def __init__(self, descriptor: str) -> None:
        self.descriptor = descriptor
        self.column = 0
        self._chars = iter(descriptor)
        self._peeked: str | None = None

    def __next__(self) -> str:
        if self._peeked is not None:
            c, self._peeked = self._peeked, None
        else:
            c = next(self._chars)
        self.column += 1
        return c

    def peek(self) -> str | None:
        if self._peeked is None:
            self._peeked = next(self._chars, None)
        return self._peeked

    def location(self) -> Location:
        return Location(self.descriptor, self.column)

    def error(self, message: str) -> DescriptorSyntaxError:
        return DescriptorSyntaxError(self.location(), message)

    def expect(self, expected: str) -> None:
        c = self.peek()
        if c != expected:
            found = repr(c) if c is not None else "end of input"
            next(self, None)
            raise self.error(f"Expected {expected!r}, got {found}")
        next(self)


def _parse_class_name(chars: _Chars) -> str:
    name = ""
    while True:
        c = chars.peek()
        if c is None:
            raise chars.error("Unterminated class name")
        next(chars)
        if c == ";":
            break
        if c in "[.<>":
            raise chars.error(f"Invalid character {c!r} in class name")
        name += c
    if not name:
        raise chars.error("Empty class name")
    return name


def _parse_field_type(chars: _Chars) -> Type:
    try:
        c = next(chars)
    except StopIteration:
        raise chars.error("Expected a field type, got end of input") from None

    if c in java.descriptor_types:
        return java.descriptor_types[c]
    elif c == "L":
        return PointerType(ClassType(_parse_class_name(chars)))
    elif c == "[":
        return PointerType(_parse_field_type(chars))
    raise chars.error(f"Invalid field type {c!r}")


def _expect_end(chars: _Chars) -> None:
    c = chars.peek()
    if c is not None:
        next(chars)
        raise chars.error(f"Trailing input starting with {c!r}")


def parse_field_descriptor(descriptor: str) -> Type:
    chars = _Chars(descriptor)
    type_ = _parse_field_type(chars)
    _expect_end(chars)
    return type_


def parse_method_descriptor(
    descriptor: str, receiver: ClassType | None = None
) -> MethodType:
    """Parse ``(params)result``.

    With a ``receiver``, a pointer to it becomes the first parameter, the way
    instance methods are typed.
    """
    chars = _Chars(descriptor)
    chars.expect("(")

    parameters: list[Type] = []
    if receiver is not None:
        parameters.append(PointerType(receiver))
    while chars.peek() != ")":
        if chars.peek() is None:
            raise chars.error("Unterminated parameter list")
        parameters.append(_parse_field_type(chars))
    chars.expect(")")

    results: tuple[Type, ...]
    if chars.peek() == "V":
        next(chars)
        results = ()
    else:
        results = (_parse_field_type(chars),)
    _expect_end(chars)

    return MethodType(tuple(parameters), results)


def entity_from_signature(owner: str | ClassType, name_sig: str, static: bool = False) -> Entity:
    """Make an entity from ``name.descriptor`` (a method) or ``name:descriptor`` (a field)."""
    owner_type = owner if isinstance(owner, ClassType) else ClassType(owner)
    allocation = Allocation.static if static else Allocation.instance

    name, sep, method_descriptor = name_sig.partition(".")
    if sep:
        receiver = None if static else owner_type
        type_: Type = parse_method_descriptor(method_descriptor, receiver)
        return Entity(owner_type, name_sig, type_, allocation)

    name, sep, field_descriptor = name_sig.partition(":")
    if not sep:
        raise DescriptorSyntaxError(
            Location(name_sig, 0), "Expected 'name.(params)result' or 'name:type'"
        )
    return Entity(owner_type, name, parse_field_descriptor(field_descriptor), allocation)
