"""تعریف خطاهای دامنه برای هستهٔ پذیرش."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class DomainError(Exception):
    """پایهٔ تمام خطاهای دامنه‌ای."""


@dataclass(frozen=True, slots=True)
class BaseDomainError(DomainError):
    """خطای غنی‌شده با زمینه برای دیباگ و گزارش‌گیری.

    Attributes:
        func: نام تابعی که خطا در آن رخ داده است.
        value: مقدار خامی که باعث خطا شده است.
        detail: توضیح کوتاه علت خطا.
    """

    func: str
    value: Any | None = None
    detail: str | None = None

    def __str__(self) -> str:  # pragma: no cover - نمایش ساده
        parts: list[str] = [self.__class__.__name__, f"func={self.func}"]
        if self.value is not None:
            parts.append(f"value={self.value!r}")
        if self.detail:
            parts.append(f"detail={self.detail}")
        return " ".join(parts)


class DuplicateIdentifierError(BaseDomainError):
    """ثبت متقاضی با شناسه‌ای که قبلاً در رجیستری وجود دارد."""


class InvalidCandidateError(BaseDomainError):
    """دادهٔ ساخت متقاضی (امتیاز یا کد دسته) نامعتبر است."""


class InvalidProgramError(BaseDomainError):
    """پیکربندی رشته (نام، ظرفیت یا حداقل امتیاز) نامعتبر است."""


__all__ = [
    "DomainError",
    "BaseDomainError",
    "DuplicateIdentifierError",
    "InvalidCandidateError",
    "InvalidProgramError",
]
