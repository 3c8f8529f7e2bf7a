from __future__ import annotations

from admission.core.allocation.engine import AllocationEngine
from admission.core.common.types import CandidateStatus
from admission.core.qa.invariants import (
    check_CAP_02,
    check_SCORE_01,
    check_STAT_01,
    run_all_invariants,
)
from admission.core.registry import CandidateRegistry
from tests.conftest import make_candidates, make_catalog


def test_batch_outcome_passes_all_rules() -> None:
    catalog = make_catalog()
    candidates = make_candidates(
        [
            (1, "A", 98, "MEDICINA", [3]),
            (2, "B", 95, "MEDICINA", [7]),
            (3, "C", 85, "MEDICINA", []),
            (4, "D", 88, "ARQUITECTURA", []),
        ]
    )
    registry = CandidateRegistry(candidates)
    AllocationEngine(catalog, registry).run_batch(candidates)

    report = run_all_invariants(catalog, candidates)

    assert report.passed
    assert report.violations == []
    frame = report.to_summary_frame()
    assert list(frame["rule_id"]) == sorted(frame["rule_id"])
    assert set(frame["status"]) == {"PASS"}


def test_forced_acceptance_is_not_a_violation() -> None:
    catalog = make_catalog()
    candidates = make_candidates([(1, "Low", 10, "MEDICINA", [])])
    engine = AllocationEngine(catalog, CandidateRegistry(candidates))
    engine.run_batch(candidates)
    engine.override_status(1, CandidateStatus.ACCEPTED)

    assert run_all_invariants(catalog, candidates).passed


def test_inconsistent_assignment_is_reported() -> None:
    candidate = make_candidates([(9, "Z", 95, "MEDICINA", [])])[0]
    candidate.mark_accepted("MEDICINA", "Segment-7")
    candidate.status = CandidateStatus.REJECTED

    result = check_STAT_01([candidate])

    assert not result.passed
    assert result.violations[0].details["candidate_id"] == 9


def test_over_acceptance_and_low_score_detected() -> None:
    catalog = make_catalog()
    candidates = make_candidates(
        [(i, f"C{i}", 50, "MEDICINA", [3]) for i in range(1, 5)]
    )
    for candidate in candidates:
        candidate.mark_accepted("MEDICINA", "Segment-3")

    cap = check_CAP_02(catalog, candidates)
    score = check_SCORE_01(catalog, candidates)
    report = run_all_invariants(catalog, candidates)

    assert not cap.passed
    assert cap.violations[0].details["accepted"] == 4
    assert len(score.violations) == 4
    assert not report.passed
    assert len(report.violations_by_rule("QA_RULE_SCORE_01")) == 4


def test_violation_frame_flattens_details() -> None:
    catalog = make_catalog()
    candidate = make_candidates([(3, "Y", 50, "MEDICINA", [])])[0]
    candidate.mark_accepted("MEDICINA", "Segment-7")

    report = run_all_invariants(catalog, [candidate])
    frame = report.to_violation_frame()

    assert report.failed_rules() == ["QA_RULE_SCORE_01"]
    assert list(frame["candidate_id"]) == [3]
    assert run_all_invariants(catalog, []).to_violation_frame().empty
