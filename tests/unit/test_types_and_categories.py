from __future__ import annotations

import pytest

from admission.core.common.types import (
    CATEGORY_NAMES,
    GENERAL_CATEGORY,
    MERIT_CATEGORY,
    CandidateStatus,
    category_label,
    category_name,
    normalize_categories,
)


def test_general_category_is_lowest_priority() -> None:
    assert GENERAL_CATEGORY == max(CATEGORY_NAMES)
    assert MERIT_CATEGORY < GENERAL_CATEGORY


def test_normalize_categories_appends_general_and_sorts() -> None:
    assert normalize_categories([5, 2, 5]) == (2, 5, 7)
    assert normalize_categories([]) == (7,)
    assert normalize_categories([7]) == (7,)


def test_normalize_categories_degree_holder_only_general() -> None:
    assert normalize_categories([1, 3], has_degree=True) == (GENERAL_CATEGORY,)


def test_category_label_and_name() -> None:
    assert category_label(3) == "Segment-3"
    assert category_name(3) == "Merit"
    assert category_name(99) == "Category-99"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("accepted", CandidateStatus.ACCEPTED),
        (" ACEPTADO ", CandidateStatus.ACCEPTED),
        ("Rechazado", CandidateStatus.REJECTED),
        ("pending", CandidateStatus.PENDING),
        (CandidateStatus.REJECTED, CandidateStatus.REJECTED),
    ],
)
def test_status_from_value(raw: object, expected: CandidateStatus) -> None:
    assert CandidateStatus.from_value(raw) is expected


def test_status_from_value_unknown_raises() -> None:
    with pytest.raises(ValueError):
        CandidateStatus.from_value("maybe")
