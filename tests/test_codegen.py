import pytest
from llvmlite import ir

from oomangle import java
from oomangle.codegen import SymbolDeclarer, declare_entity, declare_vtable
from oomangle.descriptor import entity_from_signature
from oomangle.source import MangleContractError
from oomangle.types_ import ClassType

i8_ptr = str(ir.PointerType(ir.IntType(8)))


@pytest.fixture
def ir_module():
    return ir.Module(name="test")


def test_declare_instance_method(ir_module, ctx):
    entity = entity_from_signature("java/lang/String", "charAt.(I)C")
    fn = declare_entity(ir_module, ctx, entity)
    assert isinstance(fn, ir.Function)
    assert fn.name == "_ZN4java4lang6String6charAtEJwi"
    assert fn.is_declaration
    assert str(fn.ftype.return_type) == str(ir.IntType(16))
    assert [str(arg) for arg in fn.ftype.args] == [i8_ptr, str(ir.IntType(32))]
    assert ir_module.get_global(fn.name) is fn


def test_declare_constructor_returns_void(ir_module, ctx):
    entity = entity_from_signature("java/lang/Object", "<init>.()V")
    fn = declare_entity(ir_module, ctx, entity)
    assert fn.name == "_ZN4java4lang6ObjectC1Ev"
    assert str(fn.ftype.return_type) == str(ir.VoidType())


def test_declaring_twice_reuses_the_symbol(ir_module, ctx):
    declarer = SymbolDeclarer(ir_module, ctx)
    entity = entity_from_signature("Foo", "bar.()D", static=True)
    assert declarer.declare_entity(entity) is declarer.declare_entity(entity)
    assert len(ir_module.globals) == 1


def test_declare_static_field(ir_module, ctx):
    entity = entity_from_signature("java/lang/Integer", "MAX_VALUE:I", static=True)
    var = declare_entity(ir_module, ctx, entity)
    assert isinstance(var, ir.GlobalVariable)
    assert var.name == "_ZN4java4lang7Integer9MAX_VALUEE"
    assert str(var.value_type) == str(ir.IntType(32))


def test_instance_field_has_no_symbol(ir_module, ctx):
    entity = entity_from_signature("Foo", "count:J")
    with pytest.raises(MangleContractError):
        declare_entity(ir_module, ctx, entity)


def test_declare_vtable(ir_module, ctx):
    vtable = declare_vtable(ir_module, ctx, ClassType("java/lang/Object"), 5)
    assert vtable.name == "_ZTVN4java4lang6ObjectE"
    assert str(vtable.value_type) == str(ir.ArrayType(ir.PointerType(ir.IntType(8)), 5))


def test_unknown_primitive_tag_has_no_llvm_type(ir_module):
    ctx = java.java_context()
    ctx.primitive_tags.set(java.int_, "n")
    entity = entity_from_signature("Foo", "f.(I)V", static=True)
    with pytest.raises(MangleContractError):
        declare_entity(ir_module, ctx, entity)
