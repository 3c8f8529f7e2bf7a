"""مدل خطای لایهٔ Infra برای بارگذاری پیکربندی و ورودی‌ها."""
from __future__ import annotations

from dataclasses import dataclass


class InfraError(RuntimeError):
    """پایهٔ همهٔ خطاهای لایهٔ زیرساخت."""


@dataclass(eq=True)
class ConfigError(InfraError):
    """فایل پیکربندی پذیرش وجود ندارد یا ساختار آن معتبر نیست."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} ({self.path})"


@dataclass(eq=True)
class CandidateInputError(InfraError):
    """فایل ورودی متقاضیان ستون ضروری یا مقدار معتبر ندارد."""

    path: str
    message: str
    row_index: int | None = None

    def __str__(self) -> str:
        if self.row_index is None:
            return f"{self.message} ({self.path})"
        return f"{self.message} ({self.path}, row={self.row_index})"


__all__ = ["InfraError", "ConfigError", "CandidateInputError"]
