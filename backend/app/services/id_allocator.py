"""
Barangay Portal — Resident ID Allocator
Human-readable IDs of the form R-<year><seq>, e.g. R-2024007.

seq = (count of all residents) + 1, zero-padded to 3 digits.
The count is global, not per year. Count-then-insert is not serialized,
and deletes make the count fall behind IDs already issued, so when the
unique index rejects an ID callers move past the highest stored sequence.
"""

from datetime import datetime, timezone
from typing import Optional

from app.config import get_settings


def format_resident_id(year: int, sequence: int) -> str:
    settings = get_settings()
    return f"{settings.resident_id_prefix}{year}{sequence:0{settings.resident_id_min_digits}d}"


def current_year() -> int:
    return datetime.now(timezone.utc).year


class ResidentIdAllocator:
    def __init__(self, repository):
        self.repository = repository

    def next_id(self, year: Optional[int] = None) -> str:
        """First candidate ID for the next resident."""
        count = self.repository.count_residents()
        return format_resident_id(year or current_year(), count + 1)

    def next_id_after_conflict(self, year: Optional[int] = None) -> str:
        """Candidate past every ID issued this year, used once the first candidate is taken."""
        year = year or current_year()
        highest = max(self.repository.max_resident_sequence(year), self.repository.count_residents())
        return format_resident_id(year, highest + 1)
