"""کاتالوگ رشته‌ها و شمارنده‌های ظرفیت هر دسته (Core-only).

ظرفیت کل هر رشته هنگام پیکربندی یک بار بین دستهٔ «شایستگی» (۳۰٪) و دستهٔ
«عمومی» (۷۰٪) با گرد کردن رو به پایین تقسیم می‌شود. برای ۱۵ صندلی نتیجه ۴ + ۱۰
است و یک صندلی هرگز تخصیص نمی‌یابد؛ این قاعده عیناً حفظ می‌شود.

:meth:`ProgramCatalog.try_consume` تنها مسیر کاهش ظرفیت است و منفی‌نشدن
شمارنده‌ها فقط همین‌جا تضمین می‌شود.

مثال::

    >>> catalog = ProgramCatalog()
    >>> program = catalog.configure("Medicina", 10, 90)
    >>> dict(program.capacity)
    {3: 3, 7: 7}
    >>> catalog.lookup("MEDICINA") is program
    True
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Tuple

from .common.errors import InvalidProgramError
from .common.types import CATEGORY_NAMES, GENERAL_CATEGORY, MERIT_CATEGORY

__all__ = [
    "Program",
    "ProgramCatalog",
    "DEFAULT_MIN_SCORE",
    "MERIT_SHARE_PERCENT",
    "GENERAL_SHARE_PERCENT",
    "split_capacity",
]

DEFAULT_MIN_SCORE = 70.0
MERIT_SHARE_PERCENT = 30
GENERAL_SHARE_PERCENT = 70


def split_capacity(
    total_seats: int,
    *,
    merit_percent: int = MERIT_SHARE_PERCENT,
    general_percent: int = GENERAL_SHARE_PERCENT,
) -> Dict[int, int]:
    """تقسیم صندلی‌ها بین دسته‌های شایستگی و عمومی با کف‌گیری.

    محاسبه با عدد صحیح انجام می‌شود تا خطای ممیز شناور کف را جابه‌جا نکند.

    مثال::

        >>> split_capacity(15)
        {3: 4, 7: 10}
    """

    seats = int(total_seats)
    return {
        MERIT_CATEGORY: seats * int(merit_percent) // 100,
        GENERAL_CATEGORY: seats * int(general_percent) // 100,
    }


def _program_key(name: object) -> str:
    return str(name or "").strip().upper()


@dataclass(slots=True, eq=False)
class Program:
    """تعریف یک رشته با ظرفیت باقی‌ماندهٔ هر دسته.

    Attributes:
        name: نام نمایشی رشته (همان‌طور که پیکربندی شده).
        min_score: حداقل امتیاز پذیرش.
        capacity: ظرفیت باقی‌ماندهٔ هر کد دسته (همیشه ≥ ۰).
        initial_capacity: ظرفیت پیکربندی‌شده برای گزارش‌گیری.
    """

    name: str
    min_score: float
    capacity: Dict[int, int] = field(default_factory=dict)
    initial_capacity: Dict[int, int] = field(default_factory=dict)

    @property
    def key(self) -> str:
        return _program_key(self.name)

    def remaining(self, category: int) -> int:
        return self.capacity.get(int(category), 0)

    def capacity_view(self) -> Mapping[int, int]:
        return MappingProxyType(self.capacity)


class ProgramCatalog:
    """مالک انحصاری تعاریف رشته‌ها و شمارنده‌های ظرفیت."""

    def __init__(
        self,
        *,
        merit_percent: int = MERIT_SHARE_PERCENT,
        general_percent: int = GENERAL_SHARE_PERCENT,
        default_min_score: float = DEFAULT_MIN_SCORE,
    ) -> None:
        if merit_percent < 0 or general_percent < 0 or merit_percent + general_percent > 100:
            raise InvalidProgramError(
                func="ProgramCatalog.__init__",
                value=(merit_percent, general_percent),
                detail="category shares must be non-negative and sum to at most 100",
            )
        self._programs: Dict[str, Program] = {}
        self._merit_percent = int(merit_percent)
        self._general_percent = int(general_percent)
        self._default_min_score = float(default_min_score)

    def configure(
        self,
        name: str,
        total_seats: int,
        min_score: float | None = None,
    ) -> Program:
        """تعریف یا بازتعریف رشته؛ پیکربندی قبلی با همین نام جایگزین می‌شود."""

        key = _program_key(name)
        if not key:
            raise InvalidProgramError(
                func="ProgramCatalog.configure", value=name, detail="program name is empty"
            )
        if int(total_seats) < 0:
            raise InvalidProgramError(
                func="ProgramCatalog.configure",
                value=total_seats,
                detail="total seats must be >= 0",
            )
        capacity = split_capacity(
            total_seats,
            merit_percent=self._merit_percent,
            general_percent=self._general_percent,
        )
        program = Program(
            name=str(name).strip(),
            min_score=self._default_min_score if min_score is None else float(min_score),
            capacity=dict(capacity),
            initial_capacity=dict(capacity),
        )
        self._programs[key] = program
        return program

    def set_category_capacity(self, name: str, category: int, seats: int) -> Program:
        """تعیین صریح ظرفیت یک دسته (دسته‌های دیگر به‌طور پیش‌فرض صفر هستند)."""

        program = self.lookup(name)
        if program is None:
            raise InvalidProgramError(
                func="ProgramCatalog.set_category_capacity",
                value=name,
                detail="program is not configured",
            )
        code = int(category)
        if code not in CATEGORY_NAMES:
            raise InvalidProgramError(
                func="ProgramCatalog.set_category_capacity",
                value=category,
                detail="unknown category code",
            )
        if int(seats) < 0:
            raise InvalidProgramError(
                func="ProgramCatalog.set_category_capacity",
                value=seats,
                detail="seats must be >= 0",
            )
        program.capacity[code] = int(seats)
        program.initial_capacity[code] = int(seats)
        return program

    def lookup(self, name: object) -> Program | None:
        """جست‌وجوی بدون حساسیت به حروف؛ برای نام ناموجود None برمی‌گرداند."""

        key = _program_key(name)
        if not key:
            return None
        return self._programs.get(key)

    def try_consume(self, program: Program, category: int) -> bool:
        """کاهش یک واحد ظرفیت دسته در صورت وجود صندلی آزاد."""

        code = int(category)
        remaining = program.capacity.get(code, 0)
        if remaining <= 0:
            return False
        program.capacity[code] = remaining - 1
        return True

    def programs(self) -> Tuple[Program, ...]:
        return tuple(self._programs.values())

    def __len__(self) -> int:
        return len(self._programs)

    def __iter__(self) -> Iterator[Program]:
        return iter(self.programs())

    def __contains__(self, name: object) -> bool:
        return self.lookup(name) is not None
