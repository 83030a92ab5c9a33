from typing import Final

from llvmlite import ir
from typing_extensions import assert_never

from oomangle.context import MangleContext
from oomangle.mangle import ManglingSession
from oomangle.objects import Entity
from oomangle.source import panic
from oomangle.types_ import ClassType, MethodType, PointerType, PrimitiveType, Type

_tag_to_llvm: Final = {
    "b": ir.IntType(1),
    "c": ir.IntType(8),
    "w": ir.IntType(16),
    "s": ir.IntType(16),
    "i": ir.IntType(32),
    "x": ir.IntType(64),
    "f": ir.FloatType(),
    "d": ir.DoubleType(),
}

# Objects and arrays are opaque at the symbol level
_reference_type: Final = ir.PointerType(ir.IntType(8))


def _type_to_llvm(ctx: MangleContext, type_: Type) -> ir.Type:
    if isinstance(type_, PrimitiveType):
        tag = ctx.get_primitive_type_name(type_)
        if tag not in _tag_to_llvm:
            panic("no LLVM type for primitive type '%s' (tag '%s')", type_.name, tag)
        return _tag_to_llvm[tag]
    elif isinstance(type_, PointerType):
        return _reference_type
    elif isinstance(type_, MethodType):
        return _method_to_llvm_type(ctx, type_)
    elif isinstance(type_, ClassType):
        panic("class '%s' has no value representation", type_.name)
    else:
        assert_never(type_)


def _method_to_llvm_type(ctx: MangleContext, method_type: MethodType) -> ir.FunctionType:
    # The receiver is an ordinary parameter here, unlike in the mangled name
    parameters = [_type_to_llvm(ctx, param) for param in method_type.parameters]
    return_type = (
        _type_to_llvm(ctx, method_type.get_res_type(0))
        if method_type.n_ress
        else ir.VoidType()
    )
    return ir.FunctionType(return_type, parameters)


class SymbolDeclarer:
    """Declares methods, static fields and vtables in an LLVM module under
    their mangled names.
    """

    __slots__ = ("ir_module", "session")

    def __init__(self, ir_module: ir.Module, ctx: MangleContext) -> None:
        self.ir_module = ir_module
        self.session = ManglingSession(ctx)

    @property
    def ctx(self) -> MangleContext:
        return self.session.context

    def declare_entity(self, entity: Entity) -> ir.GlobalValue:
        symbol = self.session.mangle_entity_name(entity)
        existing = self.ir_module.globals.get(symbol)
        if existing is not None:
            return existing

        if isinstance(entity.type, MethodType):
            return ir.Function(
                self.ir_module, _method_to_llvm_type(self.ctx, entity.type), symbol
            )
        if not entity.static:
            panic("instance field '%s' has no symbol of its own", entity.name)
        return ir.GlobalVariable(
            self.ir_module, _type_to_llvm(self.ctx, entity.type), symbol
        )

    def declare_vtable(self, class_type: ClassType, n_slots: int) -> ir.GlobalVariable:
        symbol = self.session.mangle_vtable_name(class_type)
        existing = self.ir_module.globals.get(symbol)
        if existing is not None:
            assert isinstance(existing, ir.GlobalVariable)
            return existing
        vtable_type = ir.ArrayType(_reference_type, n_slots)
        return ir.GlobalVariable(self.ir_module, vtable_type, symbol)


def declare_entity(ir_module: ir.Module, ctx: MangleContext, entity: Entity) -> ir.GlobalValue:
    return SymbolDeclarer(ir_module, ctx).declare_entity(entity)


def declare_vtable(
    ir_module: ir.Module, ctx: MangleContext, class_type: ClassType, n_slots: int
) -> ir.GlobalVariable:
    return SymbolDeclarer(ir_module, ctx).declare_vtable(class_type, n_slots)
