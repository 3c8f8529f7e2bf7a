from __future__ import annotations

import pytest

hypothesis = pytest.importorskip("hypothesis")
from hypothesis import given, settings  # type: ignore  # noqa: E402
from hypothesis import strategies as st  # type: ignore  # noqa: E402

from admission.core.allocation.engine import AllocationEngine, rank_candidates  # noqa: E402
from admission.core.candidate import Candidate  # noqa: E402
from admission.core.common.types import ADMIN_FORCED_LABEL, CandidateStatus  # noqa: E402
from admission.core.qa.invariants import run_all_invariants  # noqa: E402
from admission.core.registry import CandidateRegistry  # noqa: E402
from tests.conftest import make_catalog  # noqa: E402

_PROGRAMS = st.sampled_from(["MEDICINA", "INGENIERIA", "medicina", "DERECHO"])
_ROWS = st.lists(
    st.tuples(
        st.integers(min_value=0, max_value=100),
        _PROGRAMS,
        st.lists(st.integers(min_value=1, max_value=7), max_size=3),
        st.booleans(),
    ),
    max_size=40,
)


def _build(rows) -> list[Candidate]:
    return [
        Candidate(index, f"C{index}", score, program, categories, has_degree)
        for index, (score, program, categories, has_degree) in enumerate(rows, start=1)
    ]


@settings(max_examples=60, deadline=None)
@given(_ROWS)
def test_ranking_is_stable_and_descending(rows) -> None:
    ranked = rank_candidates(_build(rows))
    for earlier, later in zip(ranked, ranked[1:]):
        assert earlier.score >= later.score
        if earlier.score == later.score:
            assert earlier.candidate_id < later.candidate_id


@settings(max_examples=60, deadline=None)
@given(_ROWS)
def test_batch_respects_capacity_and_score_invariants(rows) -> None:
    catalog = make_catalog()
    candidates = _build(rows)
    engine = AllocationEngine(catalog, CandidateRegistry(candidates))

    engine.run_batch(candidates)

    assert run_all_invariants(catalog, candidates).passed
    for program in catalog.programs():
        accepted = sum(
            1
            for candidate in candidates
            if candidate.status is CandidateStatus.ACCEPTED
            and candidate.assigned_program == program.name
        )
        consumed = sum(program.initial_capacity.values()) - sum(program.capacity.values())
        assert accepted == consumed
        assert all(value >= 0 for value in program.capacity.values())
    assert all(c.status is not CandidateStatus.PENDING for c in candidates)
    assert all(c.assigned_category_label != ADMIN_FORCED_LABEL for c in candidates)


@settings(max_examples=40, deadline=None)
@given(_ROWS)
def test_batch_is_deterministic_and_idempotent(rows) -> None:
    outcomes = []
    for _ in range(2):
        catalog = make_catalog()
        candidates = _build(rows)
        engine = AllocationEngine(catalog, CandidateRegistry(candidates))
        engine.run_batch(candidates)
        first = [(c.status, c.assigned_program, c.assigned_category_label) for c in candidates]
        capacity = {p.key: dict(p.capacity) for p in catalog.programs()}

        engine.run_batch(candidates)

        assert [
            (c.status, c.assigned_program, c.assigned_category_label) for c in candidates
        ] == first
        assert {p.key: dict(p.capacity) for p in catalog.programs()} == capacity
        outcomes.append(first)
    assert outcomes[0] == outcomes[1]
