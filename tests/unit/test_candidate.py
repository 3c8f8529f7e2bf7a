from __future__ import annotations

import math

import pytest

from admission.core.candidate import Candidate, Identifiable
from admission.core.common.errors import DomainError, InvalidCandidateError
from admission.core.common.types import CandidateStatus


def test_candidate_defaults_to_pending_without_assignment() -> None:
    candidate = Candidate(1, "Ana Garcia", 98, "MEDICINA", [3])

    assert isinstance(candidate, Identifiable)
    assert candidate.status is CandidateStatus.PENDING
    assert candidate.assigned_program is None
    assert candidate.assigned_category_label is None
    assert candidate.categories == (3, 7)
    assert candidate.identification() == "ASP-2025-ID-1"
    assert candidate.category_names() == "Merit, General"


def test_degree_holder_belongs_only_to_general() -> None:
    candidate = Candidate(7, "Juan Castro", 99, "MEDICINA", [3], has_degree=True)
    assert candidate.categories == (7,)
    assert candidate.category_names() == "General"


def test_identity_fields_are_read_only() -> None:
    candidate = Candidate(2, "Luis", 85, "INGENIERIA")
    with pytest.raises(AttributeError):
        candidate.score = 100  # type: ignore[misc]
    with pytest.raises(AttributeError):
        candidate.candidate_id = 3  # type: ignore[misc]


def test_candidate_has_no_instance_dict() -> None:
    candidate = Candidate(2, "Luis", 85, "INGENIERIA")
    assert not hasattr(candidate, "__dict__")
    with pytest.raises(AttributeError):
        candidate.nickname = "Lucho"  # type: ignore[attr-defined]


@pytest.mark.parametrize("score", [-1, math.inf, math.nan, "abc"])
def test_invalid_score_rejected(score: object) -> None:
    with pytest.raises(InvalidCandidateError):
        Candidate(1, "X", score, "MEDICINA")  # type: ignore[arg-type]


def test_unknown_category_rejected() -> None:
    with pytest.raises(DomainError):
        Candidate(1, "X", 90, "MEDICINA", [42])


def test_mark_clears_assignment_and_refuses_accepted() -> None:
    candidate = Candidate(1, "X", 90, "MEDICINA")
    candidate.mark_accepted("MEDICINA", "Segment-7")
    candidate.mark(CandidateStatus.REJECTED)

    assert candidate.status is CandidateStatus.REJECTED
    assert candidate.assigned_program is None
    assert candidate.assigned_category_label is None
    with pytest.raises(ValueError):
        candidate.mark(CandidateStatus.ACCEPTED)
