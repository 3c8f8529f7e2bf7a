"""قراردادهای دادهٔ مشترک حوزهٔ پذیرش (Core-only، بدون I/O).

این ماژول فقط Enumها و ثابت‌های دسته‌بندی را نگه می‌دارد و منطق تخصیص ندارد.
کد دسته‌ها عدد صحیح است و عدد کوچک‌تر یعنی اولویت بالاتر؛ دستهٔ «عمومی» آخرین
گزینه است.

مثال:
    >>> category_label(MERIT_CATEGORY)
    'Segment-3'
    >>> CandidateStatus.from_value("aceptado")
    <CandidateStatus.ACCEPTED: 'ACCEPTED'>
"""

from __future__ import annotations

from enum import StrEnum
from types import MappingProxyType
from typing import Iterable, Mapping, Tuple

__all__ = [
    "CandidateStatus",
    "QUOTA_CATEGORY",
    "VULNERABILITY_CATEGORY",
    "MERIT_CATEGORY",
    "OTHERS_CATEGORY",
    "PEOPLES_CATEGORY",
    "REGIME_CATEGORY",
    "GENERAL_CATEGORY",
    "CATEGORY_NAMES",
    "ADMIN_FORCED_LABEL",
    "category_label",
    "category_name",
    "normalize_categories",
]

QUOTA_CATEGORY = 1
VULNERABILITY_CATEGORY = 2
MERIT_CATEGORY = 3
OTHERS_CATEGORY = 4
PEOPLES_CATEGORY = 5
REGIME_CATEGORY = 6
GENERAL_CATEGORY = 7

CATEGORY_NAMES: Mapping[int, str] = MappingProxyType(
    {
        QUOTA_CATEGORY: "Quotas",
        VULNERABILITY_CATEGORY: "Vulnerability",
        MERIT_CATEGORY: "Merit",
        OTHERS_CATEGORY: "Others",
        PEOPLES_CATEGORY: "Peoples",
        REGIME_CATEGORY: "Regime",
        GENERAL_CATEGORY: "General",
    }
)

ADMIN_FORCED_LABEL = "ADMIN_FORCED"

_STATUS_ALIASES: Mapping[str, str] = {
    "pending": "PENDING",
    "pendiente": "PENDING",
    "accepted": "ACCEPTED",
    "aceptado": "ACCEPTED",
    "accept": "ACCEPTED",
    "rejected": "REJECTED",
    "rechazado": "REJECTED",
    "reject": "REJECTED",
}


class CandidateStatus(StrEnum):
    """وضعیت نهایی یا در انتظار یک متقاضی."""

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"

    @classmethod
    def from_value(cls, value: object) -> "CandidateStatus":
        """تبدیل مقدار متنی/Enum به وضعیت؛ مقدار ناشناخته خطا می‌دهد."""

        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        canonical = _STATUS_ALIASES.get(text)
        if canonical is None:
            raise ValueError(f"Unknown candidate status '{value}'")
        return cls(canonical)


def category_label(code: int) -> str:
    """برچسب خوانای صندلی تخصیص‌یافته برای یک کد دسته."""

    return f"Segment-{int(code)}"


def category_name(code: int) -> str:
    return CATEGORY_NAMES.get(int(code), f"Category-{int(code)}")


def normalize_categories(codes: Iterable[int], *, has_degree: bool = False) -> Tuple[int, ...]:
    """ساخت فهرست مرتب و یکتای دسته‌ها با افزودن دستهٔ عمومی.

    متقاضی دارای مدرک (معافیت) فقط عضو دستهٔ عمومی است.

    مثال::

        >>> normalize_categories([3, 1, 3])
        (1, 3, 7)
        >>> normalize_categories([3], has_degree=True)
        (7,)
    """

    if has_degree:
        return (GENERAL_CATEGORY,)
    unique = {int(code) for code in codes}
    unique.add(GENERAL_CATEGORY)
    return tuple(sorted(unique))
