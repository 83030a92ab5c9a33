import pytest

from oomangle.__main__ import main


def test_mangle_method(capsys):
    assert main(["java/lang/Math", "max.(II)I", "--static"]) == 0
    assert capsys.readouterr().out.strip() == "_ZN4java4lang4Math3maxEJiii"


def test_mangle_vtable(capsys):
    assert main(["java/lang/Object", "--vtable"]) == 0
    assert capsys.readouterr().out.strip() == "_ZTVN4java4lang6ObjectE"


def test_dump_llvm(capsys):
    assert main(["java/lang/Object", "hashCode.()I", "--dump-llvm"]) == 0
    out = capsys.readouterr().out
    assert "declare" in out
    assert "_ZN4java4lang6Object8hashCodeEJiv" in out


def test_bad_descriptor(capsys):
    assert main(["Foo", "bar.(Q)V"]) == 2
    assert capsys.readouterr().err.startswith("error: Invalid field type 'Q'")


def test_member_or_vtable_required():
    with pytest.raises(SystemExit):
        main(["Foo"])
    with pytest.raises(SystemExit):
        main(["Foo", "bar.()V", "--vtable"])
