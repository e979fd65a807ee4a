from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ExecResult:
    """Outcome of a mutating statement."""

    rowcount: int
    lastrowid: Optional[int] = None
