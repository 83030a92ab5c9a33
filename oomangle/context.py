from __future__ import annotations

import typing as t

from patina import Option, Some, None_

from oomangle import types_
from oomangle.diagnostics import Diagnostic
from oomangle.source import panic

if t.TYPE_CHECKING:
    from oomangle.objects import Entity


class PrimitiveTagCache:
    """The mangled spelling of each primitive type, e.g. ``int`` -> ``i``."""

    def __init__(self) -> None:
        self._tags: t.Dict[types_.PrimitiveType, str] = {}

    def set(self, type_: types_.PrimitiveType, tag: str) -> None:
        assert isinstance(type_, types_.PrimitiveType)
        assert tag, "primitive tags are never empty"
        previous = self._tags.get(type_)
        if previous is not None and previous != tag:
            Diagnostic.primitive_tag_replaced(type_.name, previous, tag)
        self._tags[type_] = tag

    def get(self, type_: types_.PrimitiveType) -> Option[str]:
        if type_ in self._tags:
            return Some(self._tags[type_])
        return None_()

    def clear(self) -> None:
        self._tags.clear()

    def __len__(self) -> int:
        return len(self._tags)


class NameSubstitutionRegistry:
    """Fixed mangled spellings for plain entity names.

    A name can be pinned at most once for the lifetime of the registry.
    """

    def __init__(self) -> None:
        self._substitutions: t.Dict[str, str] = {}

    def add(self, name: str, mangled: str) -> None:
        if name in self._substitutions:
            panic("more than 1 substitution for name '%s'", name)
        self._substitutions[name] = mangled

    def find(self, name: str) -> Option[str]:
        if name in self._substitutions:
            return Some(self._substitutions[name])
        return None_()

    def clear(self) -> None:
        self._substitutions.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._substitutions

    def __len__(self) -> int:
        return len(self._substitutions)


class MangleContext:
    """Process-wide mangler configuration.

    Populate it during setup, then share it read-only between mangling
    sessions. Each session (and therefore each thread) gets its own
    compression table and output buffer; the context itself is never
    mutated while mangling.
    """

    def __init__(self) -> None:
        self.primitive_tags = PrimitiveTagCache()
        self.name_substitutions = NameSubstitutionRegistry()

    def set_primitive_type_name(self, type_: types_.PrimitiveType, name: str) -> None:
        self.primitive_tags.set(type_, name)

    def add_name_substitution(self, name: str, mangled: str) -> None:
        self.name_substitutions.add(name, mangled)

    def get_primitive_type_name(self, type_: types_.PrimitiveType) -> str:
        return self.primitive_tags.get(type_).unwrap_or_else(
            lambda: panic(
                "no mangled name for primitive type '%s' "
                "(set_primitive_type_name was never called for it)",
                type_.name,
            )
        )

    def mangle_entity_name(self, entity: Entity) -> str:
        from oomangle.mangle import mangle_entity_name

        return mangle_entity_name(self, entity)

    def mangle_vtable_name(self, class_type: types_.ClassType) -> str:
        from oomangle.mangle import mangle_vtable_name

        return mangle_vtable_name(self, class_type)

    def deinit(self) -> None:
        self.primitive_tags.clear()
        self.name_substitutions.clear()
