from __future__ import annotations

from typing import Sequence

import pytest

from admission.core.allocation.engine import AllocationEngine
from admission.core.candidate import Candidate
from admission.core.catalog import ProgramCatalog
from admission.core.notifications import NotificationBus
from admission.core.registry import CandidateRegistry


def make_catalog() -> ProgramCatalog:
    """کاتالوگ نمونه با دو رشتهٔ پیش‌فرض.

    مثال ساده:
        >>> dict(make_catalog().lookup("medicina").capacity)
        {3: 3, 7: 7}
    """

    catalog = ProgramCatalog()
    catalog.configure("MEDICINA", 10, 90)
    catalog.configure("INGENIERIA", 15, 80)
    return catalog


def make_candidates(rows: Sequence[tuple]) -> list[Candidate]:
    """ساخت متقاضیان از ردیف‌های ``(id, name, score, program, categories[, has_degree])``."""

    return [Candidate(*row) for row in rows]


@pytest.fixture
def catalog() -> ProgramCatalog:
    return make_catalog()


@pytest.fixture
def registry() -> CandidateRegistry:
    return CandidateRegistry()


@pytest.fixture
def bus() -> NotificationBus:
    return NotificationBus()


@pytest.fixture
def engine(
    catalog: ProgramCatalog, registry: CandidateRegistry, bus: NotificationBus
) -> AllocationEngine:
    return AllocationEngine(catalog, registry, bus)
