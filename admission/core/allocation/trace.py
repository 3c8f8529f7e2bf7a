"""رکوردهای Trace تخصیص خودکار (Core-only).

وضعیت قابل‌مشاهدهٔ متقاضی همهٔ علت‌های رد را در REJECTED خلاصه می‌کند؛ Trace
علت دقیق را برای گزارش و دیباگ نگه می‌دارد.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import pandas as pd

from ..common.reasons import LocalizedReason, ReasonCode, build_reason
from ..common.types import CandidateStatus

__all__ = ["AllocationTraceRecord", "TRACE_COLUMNS", "trace_to_frame"]

TRACE_COLUMNS = [
    "rank",
    "candidate_id",
    "program",
    "category",
    "status",
    "reason_code",
    "reason",
]


@dataclass(frozen=True, slots=True)
class AllocationTraceRecord:
    """نتیجهٔ پردازش یک متقاضی در یک اجرای دسته‌ای.

    Attributes:
        rank: جایگاه متقاضی در رتبه‌بندی (۱-پایه).
        candidate_id: شناسهٔ متقاضی.
        program: نام رشتهٔ یافت‌شده یا None.
        category: کد دستهٔ مصرف‌شده در صورت پذیرش.
        status: وضعیت نهایی پس از پردازش.
        reason_code: علت دقیق نتیجه.
    """

    rank: int
    candidate_id: int
    program: str | None
    category: int | None
    status: CandidateStatus
    reason_code: ReasonCode

    @property
    def reason(self) -> LocalizedReason:
        return build_reason(self.reason_code)


def trace_to_frame(records: Iterable[AllocationTraceRecord]) -> pd.DataFrame:
    """تبدیل رکوردهای Trace به دیتافریم با ترتیب ستون پایدار."""

    rows = [
        {
            "rank": record.rank,
            "candidate_id": record.candidate_id,
            "program": record.program,
            "category": record.category,
            "status": record.status.value,
            "reason_code": record.reason.code.value,
            "reason": record.reason.message,
        }
        for record in records
    ]
    if not rows:
        return pd.DataFrame(columns=TRACE_COLUMNS)
    return pd.DataFrame(rows, columns=TRACE_COLUMNS)
