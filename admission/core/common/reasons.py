"""سیستم مرکزی مدیریت کد/متن دلایل (Core-only).

این ماژول تنها یک SSoT برای ReasonCode فراهم می‌کند تا Trace تخصیص، نتیجهٔ
تغییر دستی و اعلان‌ها پیام یکسانی تولید کنند.

مثال::

    >>> build_reason(ReasonCode.MANUAL_CHANGE)
    LocalizedReason(code=<ReasonCode.MANUAL_CHANGE: 'MANUAL_CHANGE'>, message='manual change')
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Mapping

__all__ = ["ReasonCode", "LocalizedReason", "build_reason", "reason_message"]


class ReasonCode(StrEnum):
    """کدهای یکتای دلایل قابل گزارش در تخصیص و تغییر دستی."""

    ACCEPTED = "ACCEPTED"
    PROGRAM_NOT_FOUND = "PROGRAM_NOT_FOUND"
    INSUFFICIENT_SCORE = "INSUFFICIENT_SCORE"
    CAPACITY_EXHAUSTED = "CAPACITY_EXHAUSTED"
    NO_CATEGORIES = "NO_CATEGORIES"
    CANDIDATE_NOT_FOUND = "CANDIDATE_NOT_FOUND"
    MANUAL_CONFIRMATION = "MANUAL_CONFIRMATION"
    MANUAL_CHANGE = "MANUAL_CHANGE"


@dataclass(frozen=True, slots=True)
class LocalizedReason:
    """متن خوانای دلایل برای گزارش‌گیری انسانی."""

    code: ReasonCode
    message: str


_REASON_MESSAGES: Mapping[ReasonCode, str] = {
    ReasonCode.ACCEPTED: "seat assigned",
    ReasonCode.PROGRAM_NOT_FOUND: "desired program is not offered",
    ReasonCode.INSUFFICIENT_SCORE: "score is below the program minimum",
    ReasonCode.CAPACITY_EXHAUSTED: "no seat left in any eligible category",
    ReasonCode.NO_CATEGORIES: "candidate has no eligible category",
    ReasonCode.CANDIDATE_NOT_FOUND: "candidate id not found",
    ReasonCode.MANUAL_CONFIRMATION: "manual confirmation",
    ReasonCode.MANUAL_CHANGE: "manual change",
}


def reason_message(code: ReasonCode) -> str:
    """برگرداندن متن ذخیره‌شده برای یک کد دلیل."""

    try:
        return _REASON_MESSAGES[code]
    except KeyError as exc:
        raise ValueError(f"Reason code '{code}' تعریف نشده است") from exc


def build_reason(code: ReasonCode) -> LocalizedReason:
    """ساخت شیء :class:`LocalizedReason` با پیام پایدار."""

    return LocalizedReason(code=code, message=reason_message(code))
