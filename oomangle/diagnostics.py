import enum
import sys


class Diagnostic(enum.Enum):
    primitive_tag_replaced = "primitive-tag-replaced"
    empty_path_component = "empty-path-component"

    @property
    def message(self) -> str:
        return _diagnostic_messages[self]

    def __call__(self, *args, **kwargs) -> None:
        warn(self, *args, **kwargs)  # type: ignore


def warn(type: Diagnostic, *args, **kwargs) -> None:
    if type not in enabled_diagnostics:
        return

    if args or kwargs:  # type: ignore
        assert (bool(args) ^ bool(kwargs))  # type: ignore

    diagnostic_message = type.message % (args or kwargs)  # type: ignore
    print(f"WARN({type.value}): {diagnostic_message}", file=sys.stderr)


enabled_diagnostics = {
    Diagnostic.primitive_tag_replaced,
    Diagnostic.empty_path_component,
}


_diagnostic_messages = {
    Diagnostic.primitive_tag_replaced: "Primitive type '%s' already had mangled tag '%s', replacing it with '%s'",
    Diagnostic.empty_path_component: "Qualified class name '%s' contains an empty path component",
}
