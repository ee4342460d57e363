# File: src/models/api.py
"""
Data models for Second Brain errors and service responses.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ValidationError:
    """Represents a validation error."""
    field: str
    message: str
    entry_index: Optional[int] = None

    def __str__(self) -> str:
        """String representation of error."""
        if self.entry_index is not None:
            return f"Entry {self.entry_index} - {self.field}: {self.message}"
        return f"{self.field}: {self.message}"


class HabitValidationError(ValueError):
    """Raised when habit data is rejected."""

    def __init__(self, errors: List[ValidationError]):
        self.errors = list(errors)
        super().__init__("; ".join(str(e) for e in self.errors))

    @classmethod
    def single(cls, field_name: str, message: str) -> 'HabitValidationError':
        return cls([ValidationError(field=field_name, message=message)])


@dataclass
class AdviceResponse:
    """Response from the advice service."""
    status: str  # "success" or "fallback"
    text: str
    message: Optional[str] = None
    raw: Optional[dict] = field(default=None, repr=False)

    def is_success(self) -> bool:
        """Check if the text came from the model."""
        return self.status == "success"
