"""جمعیت پیش‌فرض متقاضیان برای اجرای نمایشی CLI."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from admission.core.candidate import Candidate

__all__ = ["DEFAULT_SEED", "build_default_candidates"]

# (id, name, score, program, categories, has_degree)
SeedRow = Tuple[int, str, float, str, Tuple[int, ...], bool]

DEFAULT_SEED: Sequence[SeedRow] = (
    (1, "Ana Garcia", 98, "MEDICINA", (3,), False),
    (2, "Luis Pincay", 85, "INGENIERIA", (2,), False),
    (3, "Maria Shuar", 92, "MEDICINA", (5,), False),
    (4, "Jose Zambrano", 70, "INGENIERIA", (), False),
    (5, "Kevin Meza", 95, "MEDICINA", (1,), False),
    (6, "Carla Vera", 88, "MEDICINA", (3,), False),
    (7, "Juan Castro", 99, "MEDICINA", (), True),
    (8, "Sofia Reyes", 91, "MEDICINA", (2,), False),
    (9, "Diego Luna", 82, "INGENIERIA", (6,), False),
    (10, "Elena Paz", 94, "MEDICINA", (4,), False),
    (11, "Roberto Solis", 89, "INGENIERIA", (3,), False),
    (12, "Lucia Fernandez", 93, "MEDICINA", (2,), False),
    (13, "Ricardo Palma", 81, "INGENIERIA", (5,), False),
    (14, "Marta Gomez", 75, "INGENIERIA", (), False),
    (15, "Andres Pico", 96, "MEDICINA", (3,), False),
    (16, "Paola Ruiz", 87, "INGENIERIA", (1,), False),
    (17, "Fernando Toro", 90, "MEDICINA", (6,), False),
    (18, "Diana Vite", 84, "INGENIERIA", (3,), False),
    (19, "Gabriel Moreira", 97, "MEDICINA", (3,), False),
    (20, "Ximena Loor", 79, "INGENIERIA", (2,), False),
)


def build_default_candidates(rows: Sequence[SeedRow] = DEFAULT_SEED) -> List[Candidate]:
    """ساخت نمونه‌های تازهٔ متقاضی به ترتیب ردیف‌ها."""

    return [
        Candidate(candidate_id, name, score, program, categories, has_degree)
        for candidate_id, name, score, program, categories, has_degree in rows
    ]
