import pytest

from oomangle import java
from oomangle.context import MangleContext, NameSubstitutionRegistry, PrimitiveTagCache
from oomangle.source import MangleContractError
from oomangle.types_ import ClassType, PrimitiveType


def test_registry_rejects_second_spelling():
    registry = NameSubstitutionRegistry()
    registry.add("<init>", "C1")
    with pytest.raises(MangleContractError, match="<init>"):
        registry.add("<init>", "C2")
    assert registry.find("<init>").unwrap() == "C1"


def test_registry_rejects_repeated_spelling_too():
    registry = NameSubstitutionRegistry()
    registry.add("foo", "3bar")
    with pytest.raises(MangleContractError):
        registry.add("foo", "3bar")


def test_registry_panic_is_reported(capsys):
    ctx = MangleContext()
    ctx.add_name_substitution("x", "1y")
    with pytest.raises(MangleContractError):
        ctx.add_name_substitution("x", "1z")
    assert capsys.readouterr().err.startswith("Panic: more than 1 substitution")


def test_primitive_tag_cache():
    cache = PrimitiveTagCache()
    unsigned = PrimitiveType("unsigned")
    assert cache.get(unsigned).is_none()
    cache.set(unsigned, "j")
    assert cache.get(unsigned).unwrap() == "j"


def test_replacing_a_primitive_tag_warns(capsys):
    cache = PrimitiveTagCache()
    cache.set(java.byte, "c")
    cache.set(java.byte, "c")
    assert capsys.readouterr().err == ""
    cache.set(java.byte, "a")
    assert "WARN(primitive-tag-replaced)" in capsys.readouterr().err
    assert cache.get(java.byte).unwrap() == "a"


def test_java_context_defaults():
    ctx = java.java_context()
    assert ctx.get_primitive_type_name(java.long) == "x"
    assert ctx.get_primitive_type_name(java.char) == "w"
    assert ctx.name_substitutions.find("<init>").unwrap() == "C1"
    assert ctx.name_substitutions.find("union").unwrap() == "6union$"
    assert "main" not in ctx.name_substitutions


def test_deinit_clears_everything():
    ctx = java.java_context()
    ctx.deinit()
    assert len(ctx.primitive_tags) == 0
    assert len(ctx.name_substitutions) == 0
    with pytest.raises(MangleContractError):
        ctx.get_primitive_type_name(java.int_)
    # Names can be registered again afterwards
    java.setup_context(ctx)


def test_contexts_are_independent():
    plain = MangleContext()
    plain.set_primitive_type_name(java.int_, "i")
    assert len(java.java_context().name_substitutions) > 0
    assert len(plain.name_substitutions) == 0
    assert plain.mangle_vtable_name(ClassType("p/Q")) == "_ZTVN1p1QE"
