from __future__ import annotations

from admission.core.allocation.engine import AllocationEngine, rank_candidates
from admission.core.allocation.trace import AllocationTraceRecord, trace_to_frame
from admission.core.common.reasons import ReasonCode, build_reason
from admission.core.common.types import CandidateStatus
from admission.core.registry import CandidateRegistry
from tests.conftest import make_candidates, make_catalog


def _engine(rows):
    catalog = make_catalog()
    candidates = make_candidates(rows)
    registry = CandidateRegistry(candidates)
    return catalog, candidates, AllocationEngine(catalog, registry)


def test_merit_then_general_then_score_rejection() -> None:
    catalog, candidates, engine = _engine(
        [
            (1, "A", 98, "MEDICINA", [3]),
            (2, "B", 95, "MEDICINA", []),
            (3, "C", 85, "MEDICINA", []),
        ]
    )

    engine.run_batch(candidates)

    a, b, c = candidates
    assert (a.status, a.assigned_category_label) == (CandidateStatus.ACCEPTED, "Segment-3")
    assert (b.status, b.assigned_category_label) == (CandidateStatus.ACCEPTED, "Segment-7")
    assert c.status is CandidateStatus.REJECTED
    assert c.assigned_program is None
    program = catalog.lookup("MEDICINA")
    assert program is not None
    assert dict(program.capacity) == {3: 2, 7: 6}


def test_ties_keep_registration_order() -> None:
    catalog, candidates, engine = _engine(
        [(10 + i, f"T{i}", 95, "MEDICINA", [], True) for i in range(8)]
    )

    engine.run_batch(candidates)

    accepted = [c.candidate_id for c in candidates if c.status is CandidateStatus.ACCEPTED]
    assert accepted == [10, 11, 12, 13, 14, 15, 16]
    assert candidates[-1].status is CandidateStatus.REJECTED
    assert [c.candidate_id for c in rank_candidates(candidates)] == list(range(10, 18))


def test_degree_holder_never_uses_merit_seat() -> None:
    catalog, candidates, engine = _engine([(7, "Juan", 99, "MEDICINA", [3], True)])
    engine.run_batch(candidates)

    assert candidates[0].assigned_category_label == "Segment-7"
    program = catalog.lookup("MEDICINA")
    assert program is not None and program.remaining(3) == 3


def test_min_score_is_inclusive_and_unknown_program_rejected() -> None:
    _, candidates, engine = _engine(
        [(1, "Edge", 90, "medicina", []), (2, "Lost", 100, "ARQUITECTURA", [3])]
    )
    trace: list[AllocationTraceRecord] = []

    engine.run_batch(candidates, trace=trace)

    assert candidates[0].status is CandidateStatus.ACCEPTED
    assert candidates[0].assigned_program == "MEDICINA"
    assert candidates[1].status is CandidateStatus.REJECTED
    codes = {record.candidate_id: record.reason_code for record in trace}
    assert codes == {1: ReasonCode.ACCEPTED, 2: ReasonCode.PROGRAM_NOT_FOUND}


def test_capacity_exhaustion_is_traced() -> None:
    _, candidates, engine = _engine(
        [(i, f"C{i}", 91, "MEDICINA", [], True) for i in range(1, 9)]
    )
    trace: list[AllocationTraceRecord] = []

    engine.run_batch(candidates, trace=trace)

    assert trace[-1].reason_code is ReasonCode.CAPACITY_EXHAUSTED
    assert trace[-1].rank == 8
    frame = trace_to_frame(trace)
    assert list(frame["reason_code"]).count("ACCEPTED") == 7
    assert trace[-1].reason == build_reason(ReasonCode.CAPACITY_EXHAUSTED)
    assert frame["reason"].iloc[-1] == trace[-1].reason.message


def test_second_run_does_not_reconsume_capacity() -> None:
    catalog, candidates, engine = _engine(
        [(1, "A", 98, "MEDICINA", [3]), (2, "B", 80, "MEDICINA", [])]
    )
    engine.run_batch(candidates)
    program = catalog.lookup("MEDICINA")
    assert program is not None
    snapshot = dict(program.capacity)
    statuses = [c.status for c in candidates]

    trace: list[AllocationTraceRecord] = []
    engine.run_batch(candidates, trace=trace)

    assert dict(program.capacity) == snapshot
    assert [c.status for c in candidates] == statuses
    assert trace == []


def test_empty_batch_reports_progress_and_changes_nothing() -> None:
    catalog, _, engine = _engine([])
    events: list[tuple[int, str]] = []

    engine.run_batch([], progress=lambda pct, msg: events.append((pct, msg)))

    assert events == [(0, "start"), (100, "done")]
    program = catalog.lookup("INGENIERIA")
    assert program is not None and dict(program.capacity) == {3: 4, 7: 10}


def test_progress_is_monotonic_and_batch_publishes_nothing() -> None:
    _, candidates, engine = _engine(
        [(1, "A", 98, "MEDICINA", [3]), (2, "B", 85, "INGENIERIA", [2])]
    )
    published: list[str] = []
    engine.bus.subscribe(lambda name, status, detail: published.append(name))
    events: list[int] = []

    engine.run_batch(candidates, progress=lambda pct, msg: events.append(pct))

    assert events == sorted(events)
    assert events[0] == 0 and events[-1] == 100
    assert published == []
