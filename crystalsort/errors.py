from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from crystalsort.layout.grid import GridSnapshot


class CrystalError(Exception):
    """Base class for every error raised by crystalsort."""


class ConfigurationError(CrystalError, ValueError):
    """Invalid construction input: sizes, relation matrix or score parameters."""


class InvariantViolation(CrystalError, RuntimeError):
    """Corrupted build state. Fatal and never retried.

    Carries the state needed to diagnose the defect: the column being worked
    on, the pending size of every column and the grid snapshot at the moment
    of failure.
    """

    def __init__(
        self,
        message: str,
        *,
        column: int | None = None,
        pending_sizes: Sequence[int] = (),
        snapshot: "GridSnapshot | None" = None,
    ) -> None:
        self.column = column
        self.pending_sizes = tuple(pending_sizes)
        self.snapshot = snapshot
        details = [message]
        if column is not None:
            details.append(f"column={column}")
        if self.pending_sizes:
            details.append(f"pending={list(self.pending_sizes)}")
        if snapshot is not None:
            details.append(f"height={snapshot.height} step={snapshot.step}")
        super().__init__(" ".join(details))
