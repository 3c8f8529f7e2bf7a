"""موتور تخصیص صندلی و مسیر تغییر دستی وضعیت (Core-only).

الگوریتم دسته‌ای حریصانه و تک‌گذره است:

1. رتبه‌بندی پایدار بر اساس امتیاز نزولی؛ امتیاز برابر ترتیب ثبت را حفظ می‌کند.
2. فقط متقاضیان PENDING پردازش می‌شوند تا اجرای دوباره ظرفیت را دوباره مصرف نکند.
3. برای هر متقاضی رشته جست‌وجو می‌شود؛ نبود رشته یا امتیاز کمتر از حداقل یعنی
   REJECTED. در غیر این صورت دسته‌ها به ترتیب صعودی امتحان می‌شوند و اولین
   مصرف موفق به ACCEPTED می‌انجامد.

اجرای دسته‌ای هیچ اعلانی منتشر نمی‌کند؛ فقط تغییر دستی از گذرگاه اعلان عبور
می‌کند. تغییر دستی به ACCEPTED ظرفیت را مصرف نمی‌کند و تنزل یک متقاضی پذیرفته
صندلی او را برنمی‌گرداند.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, MutableSequence, Sequence

from ..candidate import Candidate
from ..catalog import ProgramCatalog
from ..common.reasons import ReasonCode, build_reason
from ..common.types import ADMIN_FORCED_LABEL, CandidateStatus, category_label
from ..notifications import NotificationBus, PublishReport
from ..registry import CandidateRegistry
from .trace import AllocationTraceRecord

ProgressFn = Callable[[int, str], None]

__all__ = [
    "ProgressFn",
    "OverrideResult",
    "AllocationEngine",
    "rank_candidates",
]


def _noop_progress(_: int, __: str) -> None:
    return None


def rank_candidates(candidates: Sequence[Candidate]) -> List[Candidate]:
    """رتبه‌بندی پایدار بر اساس امتیاز نزولی.

    ``sorted`` پایدار است؛ متقاضیان هم‌امتیاز ترتیب ورودی (ترتیب ثبت) را حفظ
    می‌کنند و این ترتیب در کمبود ظرفیت نتیجه را تعیین می‌کند.
    """

    return sorted(candidates, key=lambda candidate: -candidate.score)


@dataclass(frozen=True, slots=True)
class OverrideResult:
    """نتیجهٔ خوانای یک تغییر دستی وضعیت.

    Attributes:
        candidate_id: شناسهٔ درخواستی.
        code: کد نتیجه (``MANUAL_CONFIRMATION``، ``MANUAL_CHANGE`` یا خطای یافتن).
        message: پیام خوانا برای نمایش در CLI.
        status: وضعیت نهایی متقاضی در صورت اعمال تغییر.
        delivery: گزارش تحویل اعلان در صورت انتشار.
    """

    candidate_id: int
    code: ReasonCode
    message: str
    status: CandidateStatus | None = None
    delivery: PublishReport | None = None

    @property
    def ok(self) -> bool:
        return self.code in (ReasonCode.MANUAL_CONFIRMATION, ReasonCode.MANUAL_CHANGE)


class AllocationEngine:
    """اجرای تخصیص دسته‌ای و تغییر دستی روی اشیای تزریق‌شده.

    Engine هیچ وضعیتی ندارد و فقط اشیایی را که از طریق سازنده دریافت کرده تغییر
    می‌دهد.
    """

    def __init__(
        self,
        catalog: ProgramCatalog,
        registry: CandidateRegistry,
        bus: NotificationBus | None = None,
    ) -> None:
        self._catalog = catalog
        self._registry = registry
        self._bus = bus if bus is not None else NotificationBus()

    @property
    def bus(self) -> NotificationBus:
        return self._bus

    def run_batch(
        self,
        candidates: Sequence[Candidate],
        *,
        progress: ProgressFn = _noop_progress,
        trace: MutableSequence[AllocationTraceRecord] | None = None,
    ) -> None:
        """تخصیص خودکار صندلی به متقاضیان PENDING.

        Args:
            candidates: دنبالهٔ متقاضیان به ترتیب ثبت.
            progress: callback اختیاری ``(درصد, پیام)``.
            trace: فهرست اختیاری برای دریافت یک رکورد به ازای هر متقاضی پردازش‌شده.
        """

        ranked = [
            candidate
            for candidate in rank_candidates(candidates)
            if candidate.status is CandidateStatus.PENDING
        ]
        total = len(ranked)
        progress(0, "start")
        for rank, candidate in enumerate(ranked, start=1):
            record = self._allocate_one(rank, candidate)
            if trace is not None:
                trace.append(record)
            progress(int(rank * 100 / total), f"allocating {rank}/{total}")
        progress(100, "done")

    def _allocate_one(self, rank: int, candidate: Candidate) -> AllocationTraceRecord:
        program = self._catalog.lookup(candidate.desired_program)
        if program is None:
            candidate.mark(CandidateStatus.REJECTED)
            return self._record(rank, candidate, None, None, ReasonCode.PROGRAM_NOT_FOUND)
        if candidate.score < program.min_score:
            candidate.mark(CandidateStatus.REJECTED)
            return self._record(rank, candidate, program.name, None, ReasonCode.INSUFFICIENT_SCORE)
        if not candidate.categories:
            candidate.mark(CandidateStatus.REJECTED)
            return self._record(rank, candidate, program.name, None, ReasonCode.NO_CATEGORIES)

        for category in candidate.categories:
            if self._catalog.try_consume(program, category):
                candidate.mark_accepted(program.name, category_label(category))
                return self._record(rank, candidate, program.name, category, ReasonCode.ACCEPTED)

        candidate.mark(CandidateStatus.REJECTED)
        return self._record(rank, candidate, program.name, None, ReasonCode.CAPACITY_EXHAUSTED)

    @staticmethod
    def _record(
        rank: int,
        candidate: Candidate,
        program: str | None,
        category: int | None,
        code: ReasonCode,
    ) -> AllocationTraceRecord:
        return AllocationTraceRecord(
            rank=rank,
            candidate_id=candidate.candidate_id,
            program=program,
            category=category,
            status=candidate.status,
            reason_code=code,
        )

    def override_status(
        self, candidate_id: int, new_status: CandidateStatus | str
    ) -> OverrideResult:
        """تغییر دستی وضعیت یک متقاضی با انتشار اعلان.

        پذیرش دستی ظرفیت را دور می‌زند و برچسب ``ADMIN_FORCED`` می‌گیرد؛ هر وضعیت
        دیگر فیلدهای تخصیص را پاک می‌کند بدون این‌که صندلی مصرف‌شده بازگردد.

        Raises:
            ValueError: اگر ``new_status`` وضعیت شناخته‌شده‌ای نباشد.
        """

        status = CandidateStatus.from_value(new_status)
        candidate = self._registry.find(candidate_id)
        if candidate is None:
            reason = build_reason(ReasonCode.CANDIDATE_NOT_FOUND)
            return OverrideResult(
                candidate_id=candidate_id, code=reason.code, message=reason.message
            )

        if status is CandidateStatus.ACCEPTED:
            program = self._catalog.lookup(candidate.desired_program)
            if program is None:
                reason = build_reason(ReasonCode.PROGRAM_NOT_FOUND)
                return OverrideResult(
                    candidate_id=candidate.candidate_id,
                    code=reason.code,
                    message=reason.message,
                    status=candidate.status,
                )
            candidate.mark_accepted(program.name, ADMIN_FORCED_LABEL)
            code = ReasonCode.MANUAL_CONFIRMATION
        else:
            candidate.mark(status)
            code = ReasonCode.MANUAL_CHANGE

        reason = build_reason(code)
        delivery = self._bus.publish(candidate.name, candidate.status, reason.message)
        return OverrideResult(
            candidate_id=candidate.candidate_id,
            code=reason.code,
            message=f"status: {candidate.status.value}",
            status=candidate.status,
            delivery=delivery,
        )
