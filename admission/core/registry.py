"""رجیستری مرتب متقاضیان (Core-only).

رجیستری مالک انحصاری نمونه‌های :class:`Candidate` است. یک نمونه در زمینهٔ
سطح‌بالای برنامه (CLI) ساخته می‌شود و با تزریق سازنده به Engine داده می‌شود؛
طول عمر آن با طول عمر پروسه برابر است و هیچ رکوردی حذف نمی‌شود.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Tuple

from .candidate import Candidate
from .common.errors import DuplicateIdentifierError

__all__ = ["CandidateRegistry"]


class CandidateRegistry:
    """مجموعهٔ مرتب متقاضیان به ترتیب ثبت."""

    def __init__(self, candidates: Iterable[Candidate] = ()) -> None:
        self._items: List[Candidate] = []
        self._by_id: Dict[int, Candidate] = {}
        self.register_many(candidates)

    def register(self, candidate: Candidate) -> None:
        """افزودن متقاضی به انتهای رجیستری.

        Raises:
            DuplicateIdentifierError: اگر شناسه قبلاً ثبت شده باشد.
        """

        if candidate.candidate_id in self._by_id:
            raise DuplicateIdentifierError(
                func="CandidateRegistry.register",
                value=candidate.candidate_id,
                detail="candidate id already registered",
            )
        self._items.append(candidate)
        self._by_id[candidate.candidate_id] = candidate

    def register_many(self, candidates: Iterable[Candidate]) -> None:
        for candidate in candidates:
            self.register(candidate)

    def list_all(self) -> Tuple[Candidate, ...]:
        """همهٔ متقاضیان به ترتیب ثبت (بدون مرتب‌سازی امتیاز)."""

        return tuple(self._items)

    def find(self, candidate_id: int) -> Candidate | None:
        try:
            return self._by_id.get(int(candidate_id))
        except (TypeError, ValueError):
            return None

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Candidate]:
        return iter(tuple(self._items))

    def __contains__(self, candidate_id: object) -> bool:
        return self.find(candidate_id) is not None  # type: ignore[arg-type]
