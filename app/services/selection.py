from typing import Any, Iterable, List, Set


def _ids(visible: Iterable[Any]) -> List[str]:
    return [entry.id for entry in visible]


class Selection:
    """Row selection that survives filter changes; "all" only ever means the visible rows."""

    def __init__(self):
        self.ids: Set[str] = set()

    def toggle(self, entry_id: str) -> None:
        if entry_id in self.ids:
            self.ids.discard(entry_id)
        else:
            self.ids.add(entry_id)

    def is_all_selected(self, visible: Iterable[Any]) -> bool:
        ids = _ids(visible)
        return bool(ids) and all(i in self.ids for i in ids)

    def is_some_selected(self, visible: Iterable[Any]) -> bool:
        return any(i in self.ids for i in _ids(visible))

    def toggle_all(self, visible: Iterable[Any]) -> None:
        visible = list(visible)
        if self.is_all_selected(visible):
            self.ids = set()
        else:
            self.ids = set(_ids(visible))

    def selected_visible(self, visible: Iterable[Any]) -> List[Any]:
        return [entry for entry in visible if entry.id in self.ids]

    def clear(self) -> None:
        self.ids = set()

    def __len__(self) -> int:
        return len(self.ids)

    def __contains__(self, entry_id: str) -> bool:
        return entry_id in self.ids
