"""Import run state."""

import enum
from dataclasses import dataclass


class ImportMode(enum.Enum):
    """How an import run is driven."""
    BULK = "bulk"
    STEPWISE = "stepwise"


@dataclass
class ImportLedger:
    """Success and failure counts of one import run."""
    added: int = 0
    failed: int = 0

    @property
    def processed(self) -> int:
        return self.added + self.failed

    def record_success(self) -> None:
        self.added += 1

    def record_failure(self) -> None:
        self.failed += 1

    def summary(self) -> str:
        return f"Added: {self.added} / Failed: {self.failed}"
