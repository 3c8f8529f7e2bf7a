"""موجودیت متقاضی و رابط شناسایی (Core-only).

هویت، امتیاز، رشتهٔ مورد نظر و دسته‌های متقاضی پس از ساخت تغییر نمی‌کنند؛ فقط
وضعیت و فیلدهای تخصیص توسط Engine یا تغییر دستی مقداردهی می‌شوند.

مثال::

    >>> candidate = Candidate(1, "Ana Garcia", 98, "MEDICINA", [3])
    >>> candidate.categories
    (3, 7)
    >>> candidate.identification()
    'ASP-2025-ID-1'
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Iterable, Tuple

from .common.errors import InvalidCandidateError
from .common.types import (
    CATEGORY_NAMES,
    CandidateStatus,
    category_name,
    normalize_categories,
)

__all__ = ["Identifiable", "Candidate", "IDENTIFICATION_PREFIX"]

IDENTIFICATION_PREFIX = "ASP-2025-ID-"


class Identifiable(ABC):
    """رابط حداقلی هر شخص در سیستم: نام نمایشی و شناسهٔ خوانا."""

    __slots__ = ()

    @property
    @abstractmethod
    def name(self) -> str:
        """نام نمایشی."""

    @abstractmethod
    def identification(self) -> str:
        """شناسهٔ خوانا برای نمایش و گزارش."""


class Candidate(Identifiable):
    """متقاضی صندلی در یک رشتهٔ دانشگاهی.

    Args:
        candidate_id: شناسهٔ یکتا و تغییرناپذیر.
        name: نام نمایشی.
        score: امتیاز عددی غیرمنفی.
        desired_program: نام رشتهٔ مورد نظر (تطبیق بدون حساسیت به حروف).
        categories: کدهای دستهٔ اولویت درخواستی؛ دستهٔ عمومی خودکار افزوده می‌شود.
        has_degree: متقاضی دارای مدرک فقط در دستهٔ عمومی رقابت می‌کند.

    Raises:
        InvalidCandidateError: امتیاز نامعتبر یا کد دستهٔ ناشناخته.
    """

    __slots__ = (
        "_candidate_id",
        "_name",
        "_score",
        "_desired_program",
        "_categories",
        "status",
        "assigned_program",
        "assigned_category_label",
    )

    def __init__(
        self,
        candidate_id: int,
        name: str,
        score: float,
        desired_program: str,
        categories: Iterable[int] = (),
        has_degree: bool = False,
    ) -> None:
        try:
            numeric_score = float(score)
        except (TypeError, ValueError) as exc:
            raise InvalidCandidateError(
                func="Candidate.__init__", value=score, detail="score must be numeric"
            ) from exc
        if not math.isfinite(numeric_score) or numeric_score < 0:
            raise InvalidCandidateError(
                func="Candidate.__init__", value=score, detail="score must be finite and >= 0"
            )
        requested = tuple(int(code) for code in categories)
        unknown = [code for code in requested if code not in CATEGORY_NAMES]
        if unknown:
            raise InvalidCandidateError(
                func="Candidate.__init__", value=unknown, detail="unknown category code"
            )

        self._candidate_id = int(candidate_id)
        self._name = str(name)
        self._score = numeric_score
        self._desired_program = str(desired_program or "").strip()
        self._categories = normalize_categories(requested, has_degree=has_degree)
        self.status = CandidateStatus.PENDING
        self.assigned_program: str | None = None
        self.assigned_category_label: str | None = None

    @property
    def candidate_id(self) -> int:
        return self._candidate_id

    @property
    def name(self) -> str:
        return self._name

    @property
    def score(self) -> float:
        return self._score

    @property
    def desired_program(self) -> str:
        return self._desired_program

    @property
    def categories(self) -> Tuple[int, ...]:
        return self._categories

    def identification(self) -> str:
        return f"{IDENTIFICATION_PREFIX}{self._candidate_id}"

    def category_names(self) -> str:
        """نام دسته‌هایی که متقاضی به آن‌ها تعلق دارد، جداشده با ویرگول."""

        return ", ".join(category_name(code) for code in self._categories)

    def mark_accepted(self, program_name: str, label: str) -> None:
        self.status = CandidateStatus.ACCEPTED
        self.assigned_program = program_name
        self.assigned_category_label = label

    def mark(self, status: CandidateStatus) -> None:
        """ثبت وضعیت غیرپذیرش و پاک‌کردن فیلدهای تخصیص."""

        if status is CandidateStatus.ACCEPTED:
            raise ValueError("accepted status requires mark_accepted()")
        self.status = status
        self.assigned_program = None
        self.assigned_category_label = None

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return (
            f"Candidate(id={self._candidate_id!r}, name={self._name!r}, "
            f"score={self._score!r}, status={self.status.value})"
        )
