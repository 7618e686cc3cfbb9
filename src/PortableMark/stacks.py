from __future__ import annotations

from typing import List

from .errors import StructuralImbalance
from .model import ListItemType, Mark


class MarkStack:
    """Decorators currently applied to incoming text, outermost first.

    Removal is by value rather than strict LIFO: an image nested in a link
    closes its asset mark while the link mark is still above other marks.
    """

    def __init__(self) -> None:
        self._marks: List[Mark] = []

    def __len__(self) -> int:
        return len(self._marks)

    def __contains__(self, mark: object) -> bool:
        return mark in self._marks

    def push(self, mark: Mark) -> None:
        self._marks.append(mark)

    def remove(self, mark: Mark) -> None:
        # innermost occurrence first
        for index in range(len(self._marks) - 1, -1, -1):
            if self._marks[index] == mark:
                del self._marks[index]
                return
        raise StructuralImbalance(f"closing mark {mark!r} is not active")

    def snapshot(self) -> List[Mark]:
        return list(self._marks)


class ListContext:
    """Kinds of the lists enclosing the current position; depth is the item level."""

    def __init__(self) -> None:
        self._kinds: List[ListItemType] = []

    @property
    def level(self) -> int:
        return len(self._kinds)

    def push(self, kind: ListItemType) -> None:
        self._kinds.append(kind)

    def pop(self) -> ListItemType:
        if not self._kinds:
            raise StructuralImbalance("list closed while no list is open")
        return self._kinds.pop()

    def current(self) -> tuple[int, ListItemType]:
        if not self._kinds:
            raise StructuralImbalance("list item outside of a list")
        return self.level, self._kinds[-1]
