"""اینورینت‌های QA ظرفیت و وضعیت."""

from .invariants import QaReport, run_all_invariants

__all__ = ["QaReport", "run_all_invariants"]
