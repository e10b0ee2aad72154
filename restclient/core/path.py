"""
Path
====

Ordered list of URL path segments.

Segments are stored and replayed verbatim: `.`/`..` and repeated slashes
are not normalized, so `"/a//b"` keeps its empty middle segment.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Sequence, Tuple, Union

PathLike = Union[str, Sequence[str], "Path"]


class Path:
    """
    A URL path as a list of segments.

        Path("/a/b")            -> ["", "a", "b"]  (absolute)
        Path("a").append("b/c") -> ["a", "b", "c"]
    """

    def __init__(self, path: Optional[PathLike] = None) -> None:
        self._parts: List[str] = []
        if path:
            self.append(path)

    def append(self, path: Optional[PathLike]) -> "Path":
        """
        Append segments and return self.

        Strings are split on '/', sequences are taken as segments and Path
        objects contribute their own segments.
        """
        if path is None:
            return self
        if isinstance(path, Path):
            self._parts.extend(path._parts)
        elif isinstance(path, str):
            self._parts.extend(path.split("/"))
        else:
            self._parts.extend(str(part) for part in path)
        return self

    def is_absolute(self) -> bool:
        return len(self._parts) > 0 and self._parts[0] == ""

    @property
    def parts(self) -> Tuple[str, ...]:
        return tuple(self._parts)

    def copy(self) -> "Path":
        return Path(self)

    def __str__(self) -> str:
        return "/".join(self._parts)

    def __repr__(self) -> str:
        return f"Path({str(self)!r})"

    def __len__(self) -> int:
        return len(self._parts)

    def __iter__(self) -> Iterator[str]:
        return iter(self._parts)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Path):
            return self._parts == other._parts
        if isinstance(other, str):
            return str(self) == other
        return NotImplemented


__all__ = ["Path", "PathLike"]
