from __future__ import annotations

import typing as t
from typing import Final

from oomangle.context import MangleContext
from oomangle.mangle import CONSTRUCTOR_NAME
from oomangle.types_ import PrimitiveType

boolean = PrimitiveType("boolean")
byte = PrimitiveType("byte")
char = PrimitiveType("char")
short = PrimitiveType("short")
int_ = PrimitiveType("int")
long = PrimitiveType("long")
float_ = PrimitiveType("float")
double = PrimitiveType("double")

# Same spellings the CNI headers give jboolean, jbyte, ...
primitive_tags: Final[t.Mapping[PrimitiveType, str]] = {
    boolean: "b",
    byte: "c",
    char: "w",
    short: "s",
    int_: "i",
    long: "x",
    float_: "f",
    double: "d",
}

# Descriptor characters of the primitive types, see JVMS 4.3.2
descriptor_types: Final[t.Mapping[str, PrimitiveType]] = {
    "Z": boolean,
    "B": byte,
    "C": char,
    "S": short,
    "I": int_,
    "J": long,
    "F": float_,
    "D": double,
}

# Valid Java identifiers that are reserved in C++. gcj appends a '$' to them
# so the generated headers still compile.
cxx_keywords: Final = frozenset(
    {
        "and",
        "and_eq",
        "asm",
        "auto",
        "bitand",
        "bitor",
        "bool",
        "compl",
        "const_cast",
        "delete",
        "dynamic_cast",
        "explicit",
        "export",
        "extern",
        "friend",
        "inline",
        "mutable",
        "namespace",
        "not",
        "not_eq",
        "operator",
        "or",
        "or_eq",
        "register",
        "reinterpret_cast",
        "signed",
        "sizeof",
        "static_cast",
        "struct",
        "template",
        "typedef",
        "typeid",
        "typename",
        "union",
        "unsigned",
        "using",
        "virtual",
        "wchar_t",
        "xor",
        "xor_eq",
    }
)

# Complete object constructor
constructor_spelling: Final = "C1"


def escaped_keyword_spelling(name: str) -> str:
    escaped = f"{name}$"
    return f"{len(escaped)}{escaped}"


def setup_context(ctx: MangleContext) -> MangleContext:
    for type_, tag in primitive_tags.items():
        ctx.set_primitive_type_name(type_, tag)
    ctx.add_name_substitution(CONSTRUCTOR_NAME, constructor_spelling)
    for keyword in sorted(cxx_keywords):
        ctx.add_name_substitution(keyword, escaped_keyword_spelling(keyword))
    return ctx


def java_context() -> MangleContext:
    return setup_context(MangleContext())
