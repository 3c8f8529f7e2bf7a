"""هستهٔ دامنهٔ پذیرش (بدون I/O و بدون logging)."""

from .allocation.engine import AllocationEngine, OverrideResult, rank_candidates
from .candidate import Candidate, Identifiable
from .catalog import Program, ProgramCatalog
from .notifications import NotificationBus, PublishReport
from .registry import CandidateRegistry

__all__ = [
    "AllocationEngine",
    "Candidate",
    "CandidateRegistry",
    "Identifiable",
    "NotificationBus",
    "OverrideResult",
    "Program",
    "ProgramCatalog",
    "PublishReport",
    "rank_candidates",
]
