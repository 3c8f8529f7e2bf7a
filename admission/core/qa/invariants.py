from __future__ import annotations

"""قوانین QA پس از تخصیص: ظرفیت منفی‌نشده، وضعیت سازگار و امتیاز کافی."""

from collections import Counter
from dataclasses import dataclass, field
from typing import Mapping, Sequence

import pandas as pd

from ..candidate import Candidate
from ..catalog import ProgramCatalog
from ..common.types import ADMIN_FORCED_LABEL, CandidateStatus, category_label

RuleId = str

__all__ = [
    "QaViolation",
    "QaRuleResult",
    "QaReport",
    "RULE_DESCRIPTIONS",
    "run_all_invariants",
    "check_CAP_01",
    "check_CAP_02",
    "check_STAT_01",
    "check_SCORE_01",
]

CAP_01: RuleId = "QA_RULE_CAP_01"
CAP_02: RuleId = "QA_RULE_CAP_02"
STAT_01: RuleId = "QA_RULE_STAT_01"
SCORE_01: RuleId = "QA_RULE_SCORE_01"

RULE_DESCRIPTIONS: Mapping[RuleId, str] = {
    CAP_01: "remaining capacity of every category is >= 0",
    CAP_02: "automatic acceptances per category never exceed configured seats",
    STAT_01: "assigned program/segment are set iff status is ACCEPTED",
    SCORE_01: "automatically accepted candidates meet the program minimum",
}

SUMMARY_COLUMNS = ["rule_id", "description", "status", "violations_count"]


@dataclass(frozen=True)
class QaViolation:
    """یک مورد نقض قانون همراه با دادهٔ لازم برای پیدا کردن منشأ آن."""

    rule_id: RuleId
    message: str
    details: Mapping[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class QaRuleResult:
    rule_id: RuleId
    violations: tuple[QaViolation, ...] = ()

    @property
    def passed(self) -> bool:
        return not self.violations


@dataclass(frozen=True)
class QaReport:
    """نتیجهٔ همهٔ قوانین برای یک وضعیت کاتالوگ و متقاضیان.

    ``to_summary_frame`` یک سطر برای هر قانون و ``to_violation_frame`` یک سطر
    برای هر مورد نقض می‌سازد (شیت‌های ``qa`` و ``qa_violations`` خروجی Excel).
    """

    results: tuple[QaRuleResult, ...]

    @property
    def passed(self) -> bool:
        return all(result.passed for result in self.results)

    @property
    def violations(self) -> list[QaViolation]:
        return [violation for result in self.results for violation in result.violations]

    def failed_rules(self) -> list[RuleId]:
        return [result.rule_id for result in self.results if not result.passed]

    def violations_by_rule(self, rule_id: RuleId) -> list[QaViolation]:
        return [violation for violation in self.violations if violation.rule_id == rule_id]

    def to_summary_frame(self) -> pd.DataFrame:
        rows = [
            {
                "rule_id": result.rule_id,
                "description": RULE_DESCRIPTIONS.get(result.rule_id, ""),
                "status": "PASS" if result.passed else "FAIL",
                "violations_count": len(result.violations),
            }
            for result in sorted(self.results, key=lambda item: item.rule_id)
        ]
        return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)

    def to_violation_frame(self) -> pd.DataFrame:
        rows = [
            {"rule_id": violation.rule_id, "message": violation.message, **violation.details}
            for violation in self.violations
        ]
        if not rows:
            return pd.DataFrame(columns=["rule_id", "message"])
        return pd.DataFrame(rows)


def check_CAP_01(catalog: ProgramCatalog) -> QaRuleResult:
    found = tuple(
        QaViolation(
            CAP_01,
            f"negative capacity in {program.name}/{code}",
            {"program": program.name, "category": code, "remaining": remaining},
        )
        for program in catalog.programs()
        for code, remaining in sorted(program.capacity.items())
        if remaining < 0
    )
    return QaRuleResult(CAP_01, found)


def _automatic_seats(candidates: Sequence[Candidate]) -> Counter[tuple[str, str]]:
    # صندلی‌های ADMIN_FORCED از ظرفیت کم نمی‌شوند و شمرده نمی‌شوند.
    return Counter(
        (str(candidate.assigned_program or "").upper(), str(candidate.assigned_category_label))
        for candidate in candidates
        if candidate.status is CandidateStatus.ACCEPTED
        and candidate.assigned_category_label != ADMIN_FORCED_LABEL
    )


def check_CAP_02(catalog: ProgramCatalog, candidates: Sequence[Candidate]) -> QaRuleResult:
    seats = _automatic_seats(candidates)
    found: list[QaViolation] = []
    for program in catalog.programs():
        for code, configured in sorted(program.initial_capacity.items()):
            taken = seats[(program.key, category_label(code))]
            if taken > configured:
                found.append(
                    QaViolation(
                        CAP_02,
                        f"{program.name}/{code} accepted {taken} of {configured}",
                        {
                            "program": program.name,
                            "category": code,
                            "configured": configured,
                            "accepted": taken,
                        },
                    )
                )
    return QaRuleResult(CAP_02, tuple(found))


def _assignment_consistent(candidate: Candidate) -> bool:
    fields = (candidate.assigned_program, candidate.assigned_category_label)
    if candidate.status is CandidateStatus.ACCEPTED:
        return None not in fields
    return fields == (None, None)


def check_STAT_01(candidates: Sequence[Candidate]) -> QaRuleResult:
    found = tuple(
        QaViolation(
            STAT_01,
            f"candidate {candidate.candidate_id} has inconsistent assignment",
            {
                "candidate_id": candidate.candidate_id,
                "status": candidate.status.value,
                "assigned_program": candidate.assigned_program,
            },
        )
        for candidate in candidates
        if not _assignment_consistent(candidate)
    )
    return QaRuleResult(STAT_01, found)


def check_SCORE_01(catalog: ProgramCatalog, candidates: Sequence[Candidate]) -> QaRuleResult:
    found: list[QaViolation] = []
    for candidate in candidates:
        if (
            candidate.status is not CandidateStatus.ACCEPTED
            or candidate.assigned_category_label == ADMIN_FORCED_LABEL
        ):
            continue
        program = catalog.lookup(candidate.assigned_program)
        if program is not None and candidate.score >= program.min_score:
            continue
        found.append(
            QaViolation(
                SCORE_01,
                f"candidate {candidate.candidate_id} accepted below minimum",
                {
                    "candidate_id": candidate.candidate_id,
                    "score": candidate.score,
                    "program": candidate.assigned_program,
                },
            )
        )
    return QaRuleResult(SCORE_01, tuple(found))


def run_all_invariants(
    catalog: ProgramCatalog, candidates: Sequence[Candidate]
) -> QaReport:
    """اجرای همهٔ قوانین به ترتیب ثابت.

    >>> catalog = ProgramCatalog()
    >>> _ = catalog.configure("MEDICINA", 10, 90)
    >>> run_all_invariants(catalog, []).passed
    True
    """

    items = tuple(candidates)
    return QaReport(
        (
            check_CAP_01(catalog),
            check_CAP_02(catalog, items),
            check_STAT_01(items),
            check_SCORE_01(catalog, items),
        )
    )
