"""ابزارهای ورودی/خروجی لایهٔ زیرساخت: پیکربندی JSON، متقاضیان CSV و Excel.

منطق دامنه‌ای در این ماژول قرار ندارد؛ داده‌ها فقط خوانده و به ساختارهای Core
تحویل داده می‌شوند تا اصل جداسازی Core/Infra حفظ شود.
"""

from __future__ import annotations

import contextlib
import json
import os
import re
import tempfile
from functools import lru_cache
from os import PathLike
from pathlib import Path
from typing import Dict, Iterator, List, Mapping

import pandas as pd

from admission.core.candidate import Candidate
from admission.core.common.errors import InvalidCandidateError
from admission.core.config import AdmissionConfig, normalize_config_payload

from .errors import CandidateInputError, ConfigError

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "CANDIDATE_INPUT_COLUMNS",
    "load_admission_config",
    "read_candidates_csv",
    "write_xlsx_atomic",
    "format_table",
]

DEFAULT_CONFIG_PATH = Path("config/admission.json")
CANDIDATE_INPUT_COLUMNS = ("candidate_id", "name", "score", "desired_program")
_OPTIONAL_COLUMNS = ("categories", "has_degree")
_INVALID_SHEET_CHARS = re.compile(r"[\\/*?:\[\]]")
_CATEGORY_SPLIT = re.compile(r"[;,|\s]+")
_TRUE_TOKENS = {"1", "true", "yes", "y", "si", "sí", "x"}


@lru_cache(maxsize=8)
def _load_config_cached(resolved: str, raw: str, mtime_ns: int) -> AdmissionConfig:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError(path=resolved, message=f"invalid JSON: {exc.msg}") from exc
    try:
        return normalize_config_payload(payload)
    except ValueError as exc:
        raise ConfigError(path=resolved, message=str(exc)) from exc


def load_admission_config(path: str | Path = DEFAULT_CONFIG_PATH) -> AdmissionConfig:
    """بارگذاری پیکربندی پذیرش از فایل JSON با کش وابسته به mtime.

    Raises:
        ConfigError: فایل وجود ندارد یا محتوای آن معتبر نیست.
    """

    config_path = Path(path)
    try:
        raw = config_path.read_text(encoding="utf-8")
        mtime_ns = config_path.stat().st_mtime_ns
    except FileNotFoundError as exc:
        raise ConfigError(path=str(config_path), message="admission config not found") from exc
    return _load_config_cached(str(config_path.resolve()), raw, mtime_ns)


load_admission_config.cache_clear = _load_config_cached.cache_clear  # type: ignore[attr-defined]


def _parse_categories(value: object) -> List[int]:
    text = str(value or "").strip()
    if not text:
        return []
    return [int(token) for token in _CATEGORY_SPLIT.split(text) if token]


def _parse_flag(value: object) -> bool:
    return str(value or "").strip().lower() in _TRUE_TOKENS


def read_candidates_csv(path: str | Path | PathLike[str]) -> List[Candidate]:
    """خواندن متقاضیان از CSV به ترتیب سطرها (همان ترتیب ثبت).

    ستون‌های ضروری: ``candidate_id``، ``name``، ``score``، ``desired_program``.
    ستون‌های اختیاری: ``categories`` (کدها با ``;`` جدا می‌شوند) و ``has_degree``.

    Raises:
        CandidateInputError: نبود فایل، ستون ضروری یا مقدار نامعتبر در یک سطر.
    """

    source = Path(path)
    try:
        frame = pd.read_csv(source, dtype=str, keep_default_na=False, encoding="utf-8")
    except FileNotFoundError as exc:
        raise CandidateInputError(path=str(source), message="candidates file not found") from exc

    frame.columns = [str(column).strip().lower() for column in frame.columns]
    missing = [column for column in CANDIDATE_INPUT_COLUMNS if column not in frame.columns]
    if missing:
        raise CandidateInputError(
            path=str(source), message=f"missing required columns: {', '.join(missing)}"
        )
    for column in _OPTIONAL_COLUMNS:
        if column not in frame.columns:
            frame[column] = ""

    candidates: List[Candidate] = []
    for row_index, row in enumerate(frame.to_dict(orient="records"), start=1):
        try:
            candidates.append(
                Candidate(
                    candidate_id=int(str(row["candidate_id"]).strip()),
                    name=str(row["name"]).strip(),
                    score=float(str(row["score"]).strip()),
                    desired_program=str(row["desired_program"]).strip(),
                    categories=_parse_categories(row["categories"]),
                    has_degree=_parse_flag(row["has_degree"]),
                )
            )
        except (ValueError, InvalidCandidateError) as exc:
            raise CandidateInputError(
                path=str(source), message=str(exc), row_index=row_index
            ) from exc
    return candidates


def _safe_sheet_name(name: str, taken: set[str]) -> str:
    """اصلاح و یکتا‌سازی نام شیت مطابق محدودیت‌های Excel."""

    base = _INVALID_SHEET_CHARS.sub(" ", name or "Sheet").strip() or "Sheet"
    base = base[:31]
    candidate = base
    index = 2
    while candidate in taken or not candidate:
        suffix = f" ({index})"
        candidate = (base[: max(0, 31 - len(suffix))] + suffix).rstrip()
        index += 1
    taken.add(candidate)
    return candidate


@contextlib.contextmanager
def _temporary_file_path(*, suffix: str = "", directory: Path | str | None = None) -> Iterator[Path]:
    """مدیریت مسیر فایل موقتی با پاک‌سازی خودکار پس از اتمام کار."""

    fd, name = tempfile.mkstemp(suffix=suffix, dir=directory)
    os.close(fd)
    path = Path(name)
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)


def _apply_sheet_formatting(writer: pd.ExcelWriter, frames: Mapping[str, pd.DataFrame]) -> None:
    """ثابت‌کردن سطر عنوان و تنظیم عرض ستون‌ها بر اساس طول محتوا."""

    from openpyxl.utils import get_column_letter

    for sheet_name, frame in frames.items():
        worksheet = writer.sheets[sheet_name]
        worksheet.freeze_panes = "A2"
        for position, column in enumerate(frame.columns, start=1):
            values = [str(column)] + [str(value) for value in frame[column].tolist()]
            width = min(max(len(value) for value in values) + 2, 60)
            worksheet.column_dimensions[get_column_letter(position)].width = width


def write_xlsx_atomic(
    data_dict: Dict[str, pd.DataFrame],
    filepath: Path | str | PathLike[str],
) -> Path:
    """نوشتن امن و اتمیک Excel با موتور openpyxl و مدیریت نام شیت."""

    target_path = Path(filepath)
    target_path.parent.mkdir(parents=True, exist_ok=True)
    taken: set[str] = set()
    written: Dict[str, pd.DataFrame] = {}

    with _temporary_file_path(suffix=".xlsx", directory=target_path.parent) as tmp_path:
        with pd.ExcelWriter(tmp_path, engine="openpyxl") as writer:
            for sheet_name, df in data_dict.items():
                safe_name = _safe_sheet_name(str(sheet_name), taken)
                df.to_excel(writer, sheet_name=safe_name, index=False)
                written[safe_name] = df
            _apply_sheet_formatting(writer, written)
        os.replace(tmp_path, target_path)
    return target_path


def format_table(frame: pd.DataFrame) -> str:
    """نمایش متنی دیتافریم برای خروجی کنسول."""

    if frame.empty:
        return "(empty)"
    return frame.to_string(index=False)
