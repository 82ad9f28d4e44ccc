from typing import Dict, Optional


class EntryValidationError(ValueError):
    """Save-time invariant violated; carries one message per offending field."""

    def __init__(self, field_errors: Dict[str, str]):
        self.field_errors = dict(field_errors)
        super().__init__("; ".join(f"{k}: {v}" for k, v in self.field_errors.items()))


class EntryNotFoundError(LookupError):
    def __init__(self, entry_ids, message: Optional[str] = None):
        if isinstance(entry_ids, str):
            entry_ids = [entry_ids]
        self.entry_ids = list(entry_ids)
        super().__init__(message or f"Time entry not found: {', '.join(self.entry_ids)}")


class ExportError(RuntimeError):
    pass


class PermissionDeniedError(PermissionError):
    pass


class UserNotFoundError(LookupError):
    def __init__(self, user_id: str):
        self.user_id = str(user_id)
        super().__init__(f"User not found: {self.user_id}")
