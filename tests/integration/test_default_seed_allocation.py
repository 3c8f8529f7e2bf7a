"""سناریوی کامل تخصیص روی جمعیت پیش‌فرض با پیکربندی مرجع."""
from __future__ import annotations

from admission.core.common.types import CandidateStatus
from admission.core.config import DEFAULT_CONFIG
from admission.core.qa.invariants import run_all_invariants
from admission.infra.cli import apply_override, build_session
from admission.infra.seed import build_default_candidates

EXPECTED_SEGMENTS = {
    7: ("MEDICINA", "Segment-7"),
    1: ("MEDICINA", "Segment-3"),
    19: ("MEDICINA", "Segment-3"),
    15: ("MEDICINA", "Segment-3"),
    5: ("MEDICINA", "Segment-7"),
    10: ("MEDICINA", "Segment-7"),
    12: ("MEDICINA", "Segment-7"),
    3: ("MEDICINA", "Segment-7"),
    8: ("MEDICINA", "Segment-7"),
    17: ("MEDICINA", "Segment-7"),
    11: ("INGENIERIA", "Segment-3"),
    18: ("INGENIERIA", "Segment-3"),
    16: ("INGENIERIA", "Segment-7"),
    2: ("INGENIERIA", "Segment-7"),
    9: ("INGENIERIA", "Segment-7"),
    13: ("INGENIERIA", "Segment-7"),
}


def test_default_seed_outcome() -> None:
    session = build_session(DEFAULT_CONFIG, build_default_candidates())
    candidates = session.registry.list_all()

    accepted = {
        c.candidate_id: (c.assigned_program, c.assigned_category_label)
        for c in candidates
        if c.status is CandidateStatus.ACCEPTED
    }
    rejected = sorted(c.candidate_id for c in candidates if c.status is CandidateStatus.REJECTED)

    assert accepted == EXPECTED_SEGMENTS
    assert rejected == [4, 6, 14, 20]
    medicina = session.catalog.lookup("MEDICINA")
    ingenieria = session.catalog.lookup("INGENIERIA")
    assert medicina is not None and ingenieria is not None
    assert dict(medicina.capacity) == {3: 0, 7: 0}
    assert dict(ingenieria.capacity) == {3: 2, 7: 6}
    assert len(session.trace) == 20
    assert run_all_invariants(session.catalog, candidates).passed


def test_overrides_after_batch_keep_capacity_ledger() -> None:
    notes: list[str] = []
    session = build_session(
        DEFAULT_CONFIG,
        build_default_candidates(),
        observers=(lambda name, status, detail: notes.append(f"{name}:{detail}"),),
    )

    forced = apply_override(session, 6, CandidateStatus.ACCEPTED)
    demoted = apply_override(session, 7, CandidateStatus.REJECTED)
    missing = apply_override(session, 404, CandidateStatus.ACCEPTED)

    assert forced.ok and demoted.ok and not missing.ok
    assert notes == ["Carla Vera:manual confirmation", "Juan Castro:manual change"]
    medicina = session.catalog.lookup("MEDICINA")
    assert medicina is not None
    assert dict(medicina.capacity) == {3: 0, 7: 0}
    assert run_all_invariants(session.catalog, session.registry.list_all()).passed
