"""پیکربندی پذیرش: رشته‌ها، سهم دسته‌ها و حداقل امتیاز پیش‌فرض (Core only).

خواندن فایل در لایهٔ Infra انجام می‌شود؛ این ماژول فقط payload خام را نرمال و به
ساختارهای فقط‌خواندنی تبدیل می‌کند و از روی آن کاتالوگ می‌سازد.

مثال:
    >>> config = normalize_config_payload({"programs": [{"name": "Derecho", "seats": 20}]})
    >>> config.programs[0].min_score is None
    True
    >>> build_catalog(config).lookup("derecho").capacity
    {3: 6, 7: 14}
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Mapping

from .catalog import (
    DEFAULT_MIN_SCORE,
    GENERAL_SHARE_PERCENT,
    MERIT_SHARE_PERCENT,
    ProgramCatalog,
)
from .common.errors import InvalidProgramError

__all__ = [
    "CONFIG_VERSION",
    "ProgramConfig",
    "AdmissionConfig",
    "DEFAULT_CONFIG",
    "normalize_config_payload",
    "build_catalog",
]

CONFIG_VERSION = "1.0.0"


@dataclass(frozen=True)
class ProgramConfig:
    """تعریف یک رشته در پیکربندی.

    Attributes:
        name: نام رشته.
        seats: ظرفیت کل پیش از تقسیم بین دسته‌ها.
        min_score: حداقل امتیاز؛ None یعنی مقدار پیش‌فرض کاتالوگ.
        extra_capacity: ظرفیت صریح دسته‌های دیگر (کد → صندلی).
    """

    name: str
    seats: int
    min_score: float | None = None
    extra_capacity: Mapping[int, int] = field(default_factory=dict)


@dataclass(frozen=True)
class AdmissionConfig:
    version: str = CONFIG_VERSION
    merit_share_percent: int = MERIT_SHARE_PERCENT
    general_share_percent: int = GENERAL_SHARE_PERCENT
    default_min_score: float = DEFAULT_MIN_SCORE
    programs: tuple[ProgramConfig, ...] = ()


DEFAULT_CONFIG = AdmissionConfig(
    programs=(
        ProgramConfig(name="MEDICINA", seats=10, min_score=90),
        ProgramConfig(name="INGENIERIA", seats=15, min_score=80),
    )
)


def _ensure_int(name: str, value: object, *, minimum: int = 0) -> int:
    if isinstance(value, bool):
        raise ValueError(f"'{name}' must be an integer")
    try:
        number = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValueError(f"'{name}' must be an integer") from exc
    if number < minimum:
        raise ValueError(f"'{name}' must be >= {minimum}")
    return number


def _ensure_float(name: str, value: object) -> float:
    if isinstance(value, bool):
        raise ValueError(f"'{name}' must be a number")
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValueError(f"'{name}' must be a number") from exc
    if not math.isfinite(number):
        raise ValueError(f"'{name}' must be finite")
    return number


def _normalize_program(index: int, raw: object) -> ProgramConfig:
    if not isinstance(raw, Mapping):
        raise ValueError(f"programs[{index}] must be a mapping")
    name = str(raw.get("name") or "").strip()
    if not name:
        raise ValueError(f"programs[{index}].name is required")
    seats = _ensure_int(f"programs[{index}].seats", raw.get("seats"))
    min_score_raw = raw.get("min_score")
    min_score = (
        None
        if min_score_raw is None
        else _ensure_float(f"programs[{index}].min_score", min_score_raw)
    )
    extra_raw = raw.get("extra_capacity") or {}
    if not isinstance(extra_raw, Mapping):
        raise ValueError(f"programs[{index}].extra_capacity must be a mapping")
    extra = {
        _ensure_int(f"programs[{index}].extra_capacity key", key, minimum=1): _ensure_int(
            f"programs[{index}].extra_capacity[{key}]", value
        )
        for key, value in extra_raw.items()
    }
    return ProgramConfig(name=name, seats=seats, min_score=min_score, extra_capacity=extra)


def normalize_config_payload(data: Mapping[str, object]) -> AdmissionConfig:
    """تبدیل payload خام JSON به :class:`AdmissionConfig`.

    Raises:
        ValueError: ساختار یا مقدار نامعتبر.
    """

    if not isinstance(data, Mapping):
        raise ValueError("admission config must be a mapping")
    programs_raw = data.get("programs", [])
    if not isinstance(programs_raw, list):
        raise ValueError("'programs' must be a list")
    programs = tuple(
        _normalize_program(index, item) for index, item in enumerate(programs_raw)
    )
    return AdmissionConfig(
        version=str(data.get("version", CONFIG_VERSION)),
        merit_share_percent=_ensure_int(
            "merit_share_percent", data.get("merit_share_percent", MERIT_SHARE_PERCENT)
        ),
        general_share_percent=_ensure_int(
            "general_share_percent", data.get("general_share_percent", GENERAL_SHARE_PERCENT)
        ),
        default_min_score=_ensure_float(
            "default_min_score", data.get("default_min_score", DEFAULT_MIN_SCORE)
        ),
        programs=programs,
    )


def build_catalog(config: AdmissionConfig = DEFAULT_CONFIG) -> ProgramCatalog:
    """ساخت کاتالوگ و پیکربندی همهٔ رشته‌ها به ترتیب فایل."""

    catalog = ProgramCatalog(
        merit_percent=config.merit_share_percent,
        general_percent=config.general_share_percent,
        default_min_score=config.default_min_score,
    )
    for program in config.programs:
        catalog.configure(program.name, program.seats, program.min_score)
        for category, seats in program.extra_capacity.items():
            catalog.set_category_capacity(program.name, category, seats)
    if len(catalog) != len(config.programs):
        raise InvalidProgramError(
            func="build_catalog",
            value=[program.name for program in config.programs],
            detail="duplicate program names in config",
        )
    return catalog
