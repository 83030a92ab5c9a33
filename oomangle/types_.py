import typing as t
from dataclasses import dataclass
from patina import Option, Some, None_
from typing_extensions import TypeAlias, TypeGuard


@dataclass(frozen=True)
class PrimitiveType:
    name: str


@dataclass(frozen=True)
class ClassType:
    # Slash-qualified, e.g. "java/lang/Object"
    name: str


@dataclass(frozen=True)
class PointerType:
    points_to: "Type"


@dataclass(frozen=True)
class MethodType:
    parameters: t.Tuple["Type", ...] = ()
    results: t.Tuple["Type", ...] = ()

    def __post_init__(self):
        assert len(self.results) <= 1, "methods return at most one value"

    @property
    def n_params(self) -> int:
        return len(self.parameters)

    @property
    def n_ress(self) -> int:
        return len(self.results)

    def get_param_type(self, index: int) -> "Type":
        return self.parameters[index]

    def get_res_type(self, index: int) -> "Type":
        return self.results[index]

    def result(self) -> Option["Type"]:
        if self.results:
            return Some(self.results[0])
        return None_()


Type: TypeAlias = t.Union[PrimitiveType, ClassType, PointerType, MethodType]

# Owner of free functions and globals; it has no qualification at all.
glob_type = ClassType("")


def is_class_pointer(ty: Type) -> TypeGuard[PointerType]:
    return isinstance(ty, PointerType) and isinstance(ty.points_to, ClassType)


def is_array_pointer(ty: Type) -> TypeGuard[PointerType]:
    """A pointer to anything but a class stands for a Java array."""
    return isinstance(ty, PointerType) and not isinstance(ty.points_to, ClassType)


def pointer_to(ty: Type) -> PointerType:
    return PointerType(ty)


def array_of(element_type: Type) -> PointerType:
    assert not isinstance(element_type, (ClassType, MethodType))
    return PointerType(element_type)
