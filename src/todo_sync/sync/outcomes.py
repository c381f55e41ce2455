"""Per-row sync outcomes and batch reports."""

from __future__ import annotations

from dataclasses import dataclass, field

VALIDATION_MESSAGE = "title/list_name missing"


@dataclass(frozen=True)
class SyncOutcome:
    """Result of syncing one row."""

    row_index: int

    def render(self) -> str:
        """Text written to the row's result cell."""
        raise NotImplementedError


@dataclass(frozen=True)
class Succeeded(SyncOutcome):
    task_id: str | None = None

    def render(self) -> str:
        return "Success"


@dataclass(frozen=True)
class Skipped(SyncOutcome):
    """Row failed validation; no API call was made."""

    message: str = VALIDATION_MESSAGE

    def render(self) -> str:
        return self.message


@dataclass(frozen=True)
class Failed(SyncOutcome):
    """Row reached the API stage and failed."""

    message: str = ""

    def render(self) -> str:
        return f"Error: {self.message}"


@dataclass
class BatchReport:
    """Summary of one sync run.

    Attributes:
        outcomes: One outcome per data row, in row order.
        error: Fatal error message when the batch was aborted before any row.
        write_errors: Result cells (or the final flush) that could not be
            written back to the row store.
    """

    outcomes: list[SyncOutcome] = field(default_factory=list)
    error: str | None = None
    write_errors: list[str] = field(default_factory=list)

    @property
    def aborted(self) -> bool:
        return self.error is not None

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if isinstance(o, Succeeded))

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if isinstance(o, Failed))

    @property
    def skipped(self) -> int:
        return sum(1 for o in self.outcomes if isinstance(o, Skipped))

    def summary(self) -> str:
        if self.aborted:
            return f"Sync aborted: {self.error}"
        text = (
            f"Sync finished: {self.succeeded} succeeded, "
            f"{self.failed} failed, {self.skipped} skipped"
        )
        if self.write_errors:
            text += f" ({len(self.write_errors)} results not written)"
        return text
