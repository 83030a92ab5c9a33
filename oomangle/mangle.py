"""C++ (Itanium ABI) compatible mangling of Java-like entity names.

The output is meant to demangle with ``c++filt``. Java arrays are spelled as
the template ``JArray<T>`` the way gcj/CNI headers declare them.

Substitutions follow the ABI: every prefix of a qualified name, every
``P<class>``, the ``JArray`` template name and every ``[P]JArray<T>`` is
recorded in a per-call compression table in the order it is first emitted,
and later occurrences are replaced by ``S_``, ``S0_``, ``S1_``... For

    JArray<java::lang::Object*>* java::lang::ClassLoader::putDeclaredAnnotations(
        java::lang::Class*, int, int, int, JArray<java::lang::Object*>*)

the table ends up as

    S_  = java
    S0_ = java/lang
    S1_ = java/lang/ClassLoader
    S2_ = JArray
    S3_ = java/lang/Object
    S4_ = Pjava/lang/Object
    S5_ = JArray<Pjava/lang/Object>
    S6_ = PJArray<Pjava/lang/Object>
    ...

and the symbol is
``_ZN4java4lang11ClassLoader22putDeclaredAnnotationsEJP6JArrayIPNS0_6ObjectEEPNS0_5ClassEiiiS6_``.
"""

import re
import typing as t
from contextlib import contextmanager
from typing import Final

from patina import Option, Some, None_
from typing_extensions import assert_never

from oomangle.context import MangleContext
from oomangle.diagnostics import Diagnostic
from oomangle.emit import SymbolBuffer
from oomangle.objects import Allocation, Entity
from oomangle.source import panic
from oomangle.types_ import (
    ClassType,
    MethodType,
    PointerType,
    PrimitiveType,
    Type,
    glob_type,
)

_base36: Final = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"

# Substitution indices are a single base-36 digit, which bounds the table.
CT_SIZE: Final = 36

JARRAY: Final = "JArray"
CONSTRUCTOR_NAME: Final = "<init>"

_path_component = re.compile(r"[^/]+")


class CompressionTable:
    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: t.List[str] = []

    def reset(self) -> None:
        self._entries.clear()

    def find(self, name: str) -> Option[int]:
        for index, entry in enumerate(self._entries):
            if entry == name:
                return Some(index)
        return None_()

    def insert(self, name: str) -> None:
        if len(self._entries) >= CT_SIZE:
            panic("compression table overflow while inserting '%s'", name)
        self._entries.append(name)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> t.Iterator[str]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> str:
        return self._entries[index]


def emit_substitution(match: int, buf: SymbolBuffer) -> None:
    if match == 0:
        buf.append("S_")
        return
    if not 0 < match <= len(_base36):
        panic("substitution index %d needs more than one base-36 digit", match)
    buf.append("S", _base36[match - 1], "_")


def _path_components(name: str) -> t.Iterator[t.Tuple[int, str]]:
    """Yield (end offset, component) for each component of a qualified name."""
    if name.startswith("/") or name.endswith("/") or "//" in name:
        Diagnostic.empty_path_component(name)
    for m in _path_component.finditer(name):
        yield m.end(), m.group()


class ManglingSession:
    """State for mangling one symbol at a time.

    The compression table is reset at the start of each top-level call and
    kept afterwards so it can be inspected.
    """

    __slots__ = ("context", "table", "_buffer")

    def __init__(self, context: MangleContext) -> None:
        self.context = context
        self.table = CompressionTable()
        self._buffer: t.Optional[SymbolBuffer] = None

    @property
    def buffer(self) -> SymbolBuffer:
        assert self._buffer is not None, "not inside a top-level mangle call"
        return self._buffer

    @contextmanager
    def _top_level(self, prologue: str) -> t.Iterator[SymbolBuffer]:
        if self._buffer is not None:
            panic("mangling session re-entered while mangling another name")
        self.table.reset()
        self._buffer = SymbolBuffer()
        try:
            self._buffer.append(prologue)
            yield self._buffer
        finally:
            self._buffer = None

    def _emit_substitution(self, match: int) -> None:
        emit_substitution(match, self.buffer)

    def mangle_primitive_type(self, type_: PrimitiveType) -> None:
        self.buffer.append(self.context.get_primitive_type_name(type_))

    def mangle_qualified_class_name(self, class_type: ClassType, is_pointer: bool) -> bool:
        """Encode a class name, or a pointer to it when ``is_pointer``.

        Returns whether an ``N`` was opened; closing it with ``E`` is up to
        the caller.
        """
        assert isinstance(class_type, ClassType)

        if class_type == glob_type:
            return False

        name = class_type.name
        pointer_name = "P" + name

        if is_pointer:
            full_match_p = self.table.find(pointer_name)
            if full_match_p.is_some():
                self._emit_substitution(full_match_p.unwrap())
                return False

        full_match = self.table.find(name)
        if full_match.is_some():
            if is_pointer:
                # The class is known, so its pointer becomes a candidate too.
                self.table.insert(pointer_name)
                self.buffer.append("P")
            self._emit_substitution(full_match.unwrap())
            return False

        if is_pointer:
            self.buffer.append("P")
        self.buffer.append("N")

        last_match: Option[int] = None_()
        for end, component in _path_components(name):
            prefix = name[:end]
            match = self.table.find(prefix)
            if match.is_some():
                last_match = match
                continue
            self.table.insert(prefix)
            if last_match.is_some():
                self._emit_substitution(last_match.take().unwrap())
            self.buffer.append_length_prefixed(component)

        if last_match.is_some():
            # Only reachable when no component was new
            self._emit_substitution(last_match.unwrap())

        if is_pointer:
            # Must come after the class entry created by the loop above
            if self.table.find(pointer_name).is_some():
                panic("'%s' entered the compression table twice", pointer_name)
            self.table.insert(pointer_name)

        return True

    def mangle_type_without_substitution(self, type_: Type) -> str:
        """The spelling used as a compression table key for array types."""
        if isinstance(type_, PrimitiveType):
            return self.context.get_primitive_type_name(type_)
        elif isinstance(type_, PointerType):
            points_to = type_.points_to
            if isinstance(points_to, ClassType):
                return "P" + points_to.name
            return f"{JARRAY}<{self.mangle_type_without_substitution(points_to)}>"
        elif isinstance(type_, (ClassType, MethodType)):
            panic("%r cannot be used as a parameter or result type", type_)
        else:
            assert_never(type_)

    # XXX: the array spelling is Java specific
    def mangle_array_type(self, element_type: Type) -> None:
        unsubstituted = f"P{JARRAY}<{self.mangle_type_without_substitution(element_type)}>"

        full_match = self.table.find(unsubstituted)
        if full_match.is_some():
            self._emit_substitution(full_match.unwrap())
            return

        self.buffer.append("P")
        jarray_match = self.table.find(JARRAY)
        if jarray_match.is_some():
            self._emit_substitution(jarray_match.unwrap())
        else:
            self.buffer.append_length_prefixed(JARRAY)
            self.table.insert(JARRAY)
        self.buffer.append("I")

        self.mangle_type(element_type)
        self.buffer.append("E")

        # Non-pointer version first
        self.table.insert(unsubstituted[1:])
        self.table.insert(unsubstituted)

    def mangle_type(self, type_: Type) -> None:
        if isinstance(type_, PrimitiveType):
            self.mangle_primitive_type(type_)
        elif isinstance(type_, PointerType):
            points_to = type_.points_to
            if isinstance(points_to, ClassType):
                if self.mangle_qualified_class_name(points_to, True):
                    self.buffer.append("E")
            else:
                self.mangle_array_type(points_to)
        elif isinstance(type_, (ClassType, MethodType)):
            panic("%r cannot be used as a parameter or result type", type_)
        else:
            assert_never(type_)

    def _mangle_method_signature(self, entity: Entity, name_only: str) -> None:
        type_ = entity.type
        assert isinstance(type_, MethodType)

        if name_only != CONSTRUCTOR_NAME:
            self.buffer.append("J")
            if type_.n_ress == 0:
                self.buffer.append("v")
            else:
                self.mangle_type(type_.get_res_type(0))

        # The receiver of instance methods is implicit
        start = 0 if entity.allocation is Allocation.static else 1
        if type_.n_params < start:
            panic("instance method '%s' has no receiver parameter", entity.name)
        if type_.n_params == start:
            self.buffer.append("v")
            return
        for i in range(start, type_.n_params):
            self.mangle_type(type_.get_param_type(i))

    def mangle_entity_name(self, entity: Entity) -> str:
        """Mangles in a C++ like fashion so c++filt can demangle it."""
        assert entity is not None

        with self._top_level("_Z") as buf:
            self.mangle_qualified_class_name(entity.owner, False)

            # XXX: stripping the signature from the name is Java specific
            name_only = entity.plain_name
            substitution = self.context.name_substitutions.find(name_only)
            if substitution.is_some():
                buf.append(substitution.unwrap())
            else:
                buf.append_length_prefixed(name_only)
            buf.append("E")

            if isinstance(entity.type, MethodType):
                self._mangle_method_signature(entity, name_only)

            return buf.finish()

    def mangle_vtable_name(self, class_type: ClassType) -> str:
        assert isinstance(class_type, ClassType)

        with self._top_level("_ZTV") as buf:
            emitted_n = self.mangle_qualified_class_name(class_type, False)
            if not emitted_n:
                panic("vtable name of '%s' is not a composite name", class_type.name)
            buf.append("E")
            return buf.finish()


def mangle_entity_name(context: MangleContext, entity: Entity) -> str:
    return ManglingSession(context).mangle_entity_name(entity)


def mangle_vtable_name(context: MangleContext, class_type: ClassType) -> str:
    return ManglingSession(context).mangle_vtable_name(class_type)
