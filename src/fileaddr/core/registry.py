from __future__ import annotations

from typing import Dict, Iterable, Iterator

from .model import FileType


class SignatureRegistry:
    """Mutable whitelist of FileType signatures owned by a single Parser.

    Not synchronised: callers mutating a registry from several threads must
    lock around it themselves.
    """

    def __init__(self, types: Iterable[str] = ()) -> None:
        # dict keeps membership O(1) while remembering registration order
        self._types: Dict[FileType, None] = {}
        self.add(*types)

    def add(self, *types: str) -> None:
        for ft in types:
            self._types.setdefault(FileType(ft.lower()), None)

    def remove(self, *types: str) -> None:
        for ft in types:
            self._types.pop(FileType(ft.lower()), None)

    # --- detection helpers ---
    def match(self, candidate_hex: str) -> FileType | None:
        """Return the first registered signature that prefixes ``candidate_hex``.

        When several signatures prefix the same bytes the winner is whichever
        is met first during iteration; which one that is is not part of the
        contract.
        """
        for ft in self._types:
            if ft.matches(candidate_hex):
                return ft
        return None

    def __contains__(self, ft: object) -> bool:
        return isinstance(ft, str) and FileType(ft.lower()) in self._types

    def __iter__(self) -> Iterator[FileType]:
        return iter(list(self._types))

    def __len__(self) -> int:
        return len(self._types)

    def __repr__(self) -> str:
        return f"SignatureRegistry({list(self._types)!r})"
