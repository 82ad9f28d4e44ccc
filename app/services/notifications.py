from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class Notification:
    message: str
    kind: str = "info"  # success | error | info


class Notifications:
    """Transient, dismissible toasts raised by the history panel."""

    def __init__(self):
        self.items: List[Notification] = []

    def success(self, message: str) -> None:
        self.items.append(Notification(message, "success"))

    def error(self, message: str) -> None:
        self.items.append(Notification(message, "error"))

    def dismiss(self, index: int) -> None:
        if 0 <= index < len(self.items):
            del self.items[index]

    def clear(self) -> None:
        self.items.clear()

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def __len__(self) -> int:
        return len(self.items)
