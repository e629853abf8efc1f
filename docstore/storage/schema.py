from __future__ import annotations

from typing import Iterable, Tuple

Path = Tuple[str, ...]

WILDCARD = "*"


class SequenceSchema:
    """Schema positions whose values must always load as lists.

    A position is a tuple of element names counted from the tree root
    (the XML root element itself is not part of the path). List members share
    their parent's name, so indices never appear in a path. ``"*"`` matches
    any single name.
    """

    def __init__(self, paths: Iterable[Iterable[str]] = ()):
        self.paths = frozenset(tuple(p) for p in paths)

    def is_sequence(self, path: Path) -> bool:
        return any(_matches(pattern, path) for pattern in self.paths)

    def __repr__(self) -> str:
        return f"SequenceSchema({sorted(self.paths)!r})"


def _matches(pattern: Path, path: Path) -> bool:
    if len(pattern) != len(path):
        return False
    return all(p == WILDCARD or p == name for p, name in zip(pattern, path))


# Generic variant: every root key names a collection of records.
COLLECTIONS_SCHEMA = SequenceSchema([(WILDCARD,)])

EMPTY_SCHEMA = SequenceSchema()
