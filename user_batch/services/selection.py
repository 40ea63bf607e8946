from __future__ import annotations

from collections.abc import Sequence

from ..models.user_record import UserRecord

"""Selection tracker: display position -> selected flag.

Positions refer to the list as currently rendered. Ids are resolved only when a
delete is requested, against the list loaded at that moment; a position that no
longer has a record (the list shrank after a refresh) resolves to nothing.
"""

__all__ = ["SelectionTracker"]


class SelectionTracker:
    def __init__(self) -> None:
        self._selected: dict[int, bool] = {}

    def set(self, position: int, selected: bool = True) -> None:
        if position < 0:
            raise ValueError(f"position must be >= 0: {position}")
        if selected:
            self._selected[position] = True
        else:
            # 未選択はキーごと削除 (件数 = キー数)
            self._selected.pop(position, None)

    def toggle(self, position: int) -> bool:
        now = not self.is_selected(position)
        self.set(position, now)
        return now

    def set_all(self, row_count: int, selected: bool = True) -> None:
        """Header checkbox: select / deselect every rendered row."""
        if selected:
            self._selected = {i: True for i in range(row_count)}
        else:
            self._selected = {}

    def is_selected(self, position: int) -> bool:
        return self._selected.get(position, False)

    @property
    def positions(self) -> list[int]:
        return sorted(p for p, flag in self._selected.items() if flag)

    def resolve_ids(self, records: Sequence[UserRecord]) -> list[int]:
        """Ids of the selected rows, in display order; stale positions dropped."""
        ids: list[int] = []
        for position in self.positions:
            if position < len(records):
                ids.append(records[position].id)
        return ids

    def clear(self) -> None:
        self._selected = {}

    def __len__(self) -> int:
        return len(self.positions)
