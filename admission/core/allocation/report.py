"""ساخت دیتافریم‌های گزارش متقاضیان و ظرفیت برای نمایش و خروجی.

این توابع فقط می‌خوانند و هیچ وضعیتی را تغییر نمی‌دهند. پذیرش دستی ظرفیتی
مصرف نمی‌کند، پس «اشتراک بیش از ظرفیت» فقط با مقایسهٔ تعداد پذیرفته‌ها با
ظرفیت پیکربندی‌شده دیده می‌شود؛ ستون ``oversubscribed`` همین مقایسه است.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Sequence

import pandas as pd

from ..candidate import Candidate
from ..catalog import ProgramCatalog
from ..common.types import (
    ADMIN_FORCED_LABEL,
    CandidateStatus,
    category_label,
    category_name,
)

__all__ = [
    "CANDIDATE_COLUMNS",
    "CAPACITY_COLUMNS",
    "PROGRAM_COLUMNS",
    "build_candidate_frame",
    "build_capacity_frame",
    "build_program_summary",
]

CANDIDATE_COLUMNS = [
    "candidate_id",
    "identification",
    "name",
    "score",
    "categories",
    "desired_program",
    "status",
    "assigned_program",
    "assigned_segment",
]

CAPACITY_COLUMNS = [
    "program",
    "category",
    "category_name",
    "configured",
    "remaining",
    "consumed",
    "accepted_auto",
]

PROGRAM_COLUMNS = [
    "program",
    "min_score",
    "configured_total",
    "remaining_total",
    "accepted_auto",
    "accepted_forced",
    "accepted_total",
    "oversubscribed",
]


def build_candidate_frame(candidates: Iterable[Candidate]) -> pd.DataFrame:
    """فهرست متقاضیان به ترتیب ورودی با دسته‌ها، وضعیت و صندلی تخصیص‌یافته."""

    rows = [
        {
            "candidate_id": candidate.candidate_id,
            "identification": candidate.identification(),
            "name": candidate.name,
            "score": candidate.score,
            "categories": candidate.category_names(),
            "desired_program": candidate.desired_program,
            "status": candidate.status.value,
            "assigned_program": candidate.assigned_program or "",
            "assigned_segment": candidate.assigned_category_label or "",
        }
        for candidate in candidates
    ]
    if not rows:
        return pd.DataFrame(columns=CANDIDATE_COLUMNS)
    return pd.DataFrame(rows, columns=CANDIDATE_COLUMNS)


def _accepted_labels(candidates: Sequence[Candidate]) -> Counter[tuple[str, str]]:
    counts: Counter[tuple[str, str]] = Counter()
    for candidate in candidates:
        if candidate.status is not CandidateStatus.ACCEPTED:
            continue
        program = str(candidate.assigned_program or "").strip().upper()
        counts[(program, str(candidate.assigned_category_label or ""))] += 1
    return counts


def build_capacity_frame(
    catalog: ProgramCatalog, candidates: Iterable[Candidate] = ()
) -> pd.DataFrame:
    """ظرفیت پیکربندی‌شده، باقی‌مانده و مصرف‌شدهٔ هر رشته × دسته."""

    counts = _accepted_labels(tuple(candidates))
    rows = []
    for program in catalog.programs():
        categories = sorted(set(program.initial_capacity) | set(program.capacity))
        for code in categories:
            configured = int(program.initial_capacity.get(code, 0))
            remaining = int(program.capacity.get(code, 0))
            rows.append(
                {
                    "program": program.name,
                    "category": code,
                    "category_name": category_name(code),
                    "configured": configured,
                    "remaining": remaining,
                    "consumed": configured - remaining,
                    "accepted_auto": counts.get((program.key, category_label(code)), 0),
                }
            )
    if not rows:
        return pd.DataFrame(columns=CAPACITY_COLUMNS)
    return pd.DataFrame(rows, columns=CAPACITY_COLUMNS)


def build_program_summary(
    catalog: ProgramCatalog, candidates: Iterable[Candidate] = ()
) -> pd.DataFrame:
    """خلاصهٔ هر رشته همراه با تعداد پذیرش دستی و پرچم اشتراک بیش از ظرفیت."""

    counts = _accepted_labels(tuple(candidates))
    capacity = build_capacity_frame(catalog)
    rows = []
    for program in catalog.programs():
        block = capacity[capacity["program"] == program.name]
        configured_total = int(block["configured"].sum())
        accepted_auto = sum(
            count
            for (key, label), count in counts.items()
            if key == program.key and label != ADMIN_FORCED_LABEL
        )
        accepted_forced = counts.get((program.key, ADMIN_FORCED_LABEL), 0)
        accepted_total = accepted_auto + accepted_forced
        rows.append(
            {
                "program": program.name,
                "min_score": program.min_score,
                "configured_total": configured_total,
                "remaining_total": int(block["remaining"].sum()),
                "accepted_auto": accepted_auto,
                "accepted_forced": accepted_forced,
                "accepted_total": accepted_total,
                "oversubscribed": accepted_total > configured_total,
            }
        )
    if not rows:
        return pd.DataFrame(columns=PROGRAM_COLUMNS)
    return pd.DataFrame(rows, columns=PROGRAM_COLUMNS)
