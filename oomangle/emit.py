import sys
import typing as t

from oomangle.source import panic


class SymbolBuffer:
    def __init__(self) -> None:
        self._buf: t.List[str] = []
        self._size = 0
        self._finished = False

    def append(self, *chunks: str) -> None:
        if self._finished:
            panic("append to a finished symbol buffer")
        for chunk in chunks:
            self._buf.append(chunk)
            self._size += len(chunk)

    def append_length_prefixed(self, name: str) -> None:
        self.append(str(len(name)), name)

    @property
    def size(self) -> int:
        return self._size

    def getvalue(self) -> str:
        return "".join(self._buf)

    def finish(self) -> str:
        """Intern the symbol and release the buffer."""
        if self._finished:
            panic("symbol buffer finished twice")
        result = sys.intern(self.getvalue())
        self._buf.clear()
        self._size = 0
        self._finished = True
        return result
