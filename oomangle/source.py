import sys
import typing as t
from dataclasses import dataclass


class MangleException(Exception):
    pass


class MangleContractError(MangleException):
    """A caller broke an invariant the mangler relies on.

    These are bugs in the calling compiler pass, not bad input, so nothing in
    this package catches them.
    """


class DescriptorSyntaxError(MangleException):
    def __init__(self, location: "Location", message: str):
        super().__init__(f"{message} in {location}")
        self.location = location


@dataclass(frozen=True)
class Location:
    descriptor: str
    column: int

    def __str__(self):
        return f"descriptor {self.descriptor!r} at column {self.column}"


def panic(fmt: str, *args: object) -> t.NoReturn:
    message = fmt % args if args else fmt
    print(f"Panic: {message}", file=sys.stderr)
    raise MangleContractError(message)
