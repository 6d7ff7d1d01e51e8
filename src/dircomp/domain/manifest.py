from __future__ import annotations

"""
Torrent Manifest Data Model.

An immutable view of the relative file paths a torrent declares, keeping the
declaration order for display and hashed indexes for containment queries.
"""

import os
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Iterator, Set, Tuple


@dataclass(frozen=True)
class Manifest:
    """
    Ordered, immutable set of relative paths declared by a torrent.

    Attributes:
        paths: Relative paths in metadata order (native separators).
    """
    paths: Tuple[str, ...]
    _index: FrozenSet[str] = field(init=False, repr=False, compare=False)
    _ancestors: FrozenSet[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_index", frozenset(self.paths))
        object.__setattr__(self, "_ancestors", frozenset(_ancestor_dirs(self.paths)))

    @classmethod
    def from_paths(cls, paths: Iterable[str]) -> "Manifest":
        return cls(tuple(paths))

    def is_ancestor(self, rel_path: str) -> bool:
        """True if ``rel_path`` is a directory on the way to a declared file."""
        return rel_path in self._ancestors

    def __contains__(self, rel_path: object) -> bool:
        return rel_path in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self.paths)

    def __len__(self) -> int:
        return len(self.paths)


def _ancestor_dirs(paths: Iterable[str]) -> Set[str]:
    found: Set[str] = set()
    for path in paths:
        parent = os.path.dirname(path)
        while parent and parent not in found:
            found.add(parent)
            parent = os.path.dirname(parent)
    return found
