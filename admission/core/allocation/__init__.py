"""Engine تخصیص، Trace و گزارش‌های ظرفیت."""

from .engine import AllocationEngine, OverrideResult, ProgressFn, rank_candidates
from .trace import AllocationTraceRecord, trace_to_frame

__all__ = [
    "AllocationEngine",
    "AllocationTraceRecord",
    "OverrideResult",
    "ProgressFn",
    "rank_candidates",
    "trace_to_frame",
]
