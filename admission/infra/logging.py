"""راه‌اندازی logging برای هر اجرای تخصیص و ثبت گزارش خطاهای مهارنشده.

هر اجرای CLI یک :class:`RunContext` می‌سازد که شناسهٔ اجرا، کاربر اجراکننده و
فرمان را نگه می‌دارد. :class:`RunContextFilter` این اطلاعات را روی همهٔ رکوردها
می‌نشاند تا در فایل لاگ بتوان خطوط یک اجرا را از اجرای دیگر جدا کرد.
"""
from __future__ import annotations

import getpass
import logging
import logging.config
import os
import sys
import traceback
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from time import perf_counter
from types import TracebackType
from typing import Any, Callable, Iterator, Sequence

import yaml

DEFAULT_LOGGING_CONFIG = Path("config/logging.yaml")
DEFAULT_LOG_DIR = Path("logs")
INCIDENT_SUBDIR = "incidents"

_BASIC_FORMAT = "%(levelname)s %(name)s | run=%(run_id)s | %(message)s"
_RECORD_DEFAULTS = ("incident_id", "incident_report")


@dataclass(slots=True, frozen=True)
class RunContext:
    """مشخصات یک اجرای برنامه برای برچسب‌زدن لاگ و گزارش حادثه.

    مثال::

        >>> from pathlib import Path
        >>> ctx = RunContext(
        ...     application="AdmissionAllocator",
        ...     version="1.0.0",
        ...     run_id="r1",
        ...     operator="registrar",
        ...     pid=42,
        ...     command="run",
        ...     log_dir=Path("logs"),
        ... )
        >>> ctx.incident_dir.name
        'incidents'
    """

    application: str
    version: str
    run_id: str
    operator: str
    pid: int
    command: str
    log_dir: Path

    @property
    def incident_dir(self) -> Path:
        return self.log_dir / INCIDENT_SUBDIR

    def next_incident_id(self) -> str:
        return f"{self.run_id[:12]}-{uuid.uuid4().hex[:6]}"

    def dump_incident(self, incident_id: str, summary: str, trace_text: str) -> Path:
        """ذخیرهٔ گزارش یک حادثه؛ پوشهٔ گزارش‌ها فقط در اولین حادثه ساخته می‌شود."""

        now = datetime.now(timezone.utc)
        self.incident_dir.mkdir(parents=True, exist_ok=True)
        target = self.incident_dir / f"{now:%Y%m%d-%H%M%S}-{incident_id}.txt"
        fields = {
            "incident": incident_id,
            "run": self.run_id,
            "application": f"{self.application} {self.version}",
            "command": self.command,
            "operator": self.operator,
            "pid": self.pid,
            "utc": now.isoformat(timespec="seconds"),
        }
        lines = [f"{key}: {value}" for key, value in fields.items()]
        lines += ["", summary.strip(), "", trace_text.rstrip(), ""]
        target.write_text("\n".join(lines), encoding="utf-8")
        return target


class RunContextFilter(logging.Filter):
    """برچسب اجرا را روی رکوردهایی که آن را ندارند می‌گذارد."""

    def __init__(self, context: RunContext) -> None:
        super().__init__()
        self.context = context

    def filter(self, record: logging.LogRecord) -> bool:
        values = {
            "run_id": self.context.run_id,
            "operator": self.context.operator,
            "application": self.context.application,
            "app_version": self.context.version,
            "command": self.context.command,
        }
        values.update({name: "" for name in _RECORD_DEFAULTS})
        for name, value in values.items():
            if not hasattr(record, name):
                setattr(record, name, value)
        return True


def _bind_filter(loggers: Sequence[logging.Logger], run_filter: RunContextFilter) -> None:
    # هر logger و handler حداکثر یک RunContextFilter دارد.
    for target in loggers:
        for holder in (target, *target.handlers):
            holder.filters = [f for f in holder.filters if not isinstance(f, RunContextFilter)]
            holder.addFilter(run_filter)


def _rebase_file_handlers(config: dict[str, Any], log_dir: Path | None) -> None:
    """انتقال فایل‌های لاگ نسبی به ``log_dir`` و ساخت پوشهٔ آن‌ها."""

    handlers = config.get("handlers")
    if not isinstance(handlers, dict):
        return
    for handler_cfg in handlers.values():
        if not isinstance(handler_cfg, dict) or not handler_cfg.get("filename"):
            continue
        path = Path(str(handler_cfg["filename"])).expanduser()
        if log_dir is not None and not path.is_absolute():
            path = log_dir / path.name
        path = path.resolve()
        path.parent.mkdir(parents=True, exist_ok=True)
        handler_cfg["filename"] = str(path)


def setup_logging(
    config_path: str | Path = DEFAULT_LOGGING_CONFIG,
    log_dir: str | Path | None = None,
) -> None:
    """اعمال پیکربندی YAML با ``logging.config.dictConfig``.

    Raises:
        FileNotFoundError: فایل پیکربندی وجود ندارد.
        ValueError: محتوای YAML نگاشت نیست.
    """

    path = Path(config_path)
    if not path.is_file():
        raise FileNotFoundError(f"logging config not found: {path}")
    data: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"logging config must be a mapping: {path}")
    _rebase_file_handlers(data, Path(log_dir).expanduser().resolve() if log_dir else None)
    logging.config.dictConfig(data)


def configure_logging(
    *,
    app_name: str,
    app_version: str,
    logger_name: str,
    config_path: str | Path = DEFAULT_LOGGING_CONFIG,
    log_dir: str | Path | None = None,
    command: str = "",
) -> RunContext:
    """راه‌اندازی logging برای یک اجرا و بازگرداندن :class:`RunContext` آن.

    نبود فایل YAML خطا نیست: در این حالت فقط یک handler روی stderr نصب می‌شود و
    هیچ فایلی ساخته نمی‌شود.
    """

    directory = Path(log_dir or DEFAULT_LOG_DIR).expanduser().resolve()
    if Path(config_path).is_file():
        setup_logging(config_path, directory)
    else:
        logging.basicConfig(level=logging.INFO, format=_BASIC_FORMAT, stream=sys.stderr)

    context = RunContext(
        application=app_name,
        version=app_version,
        run_id=uuid.uuid4().hex,
        operator=getpass.getuser(),
        pid=os.getpid(),
        command=command,
        log_dir=directory,
    )
    _bind_filter((logging.getLogger(), logging.getLogger(logger_name)), RunContextFilter(context))
    logging.captureWarnings(True)
    return context


def install_exception_hook(logger: logging.Logger, context: RunContext) -> Callable[[], None]:
    """ثبت خطاهای مهارنشده در لاگ و در یک فایل حادثه.

    Returns:
        تابعی که ``sys.excepthook`` قبلی را برمی‌گرداند.
    """

    previous = sys.excepthook

    def _hook(
        exc_type: type[BaseException],
        exc_value: BaseException,
        exc_tb: TracebackType | None,
    ) -> None:
        if not issubclass(exc_type, KeyboardInterrupt):
            incident_id = context.next_incident_id()
            report = context.dump_incident(
                incident_id,
                f"{exc_type.__name__}: {exc_value}",
                "".join(traceback.format_exception(exc_type, exc_value, exc_tb)),
            )
            logger.critical(
                "unhandled %s during '%s'",
                exc_type.__name__,
                context.command,
                exc_info=(exc_type, exc_value, exc_tb),
                extra={"incident_id": incident_id, "incident_report": str(report)},
            )
        previous(exc_type, exc_value, exc_tb)

    sys.excepthook = _hook

    def restore() -> None:
        sys.excepthook = previous

    return restore


@contextmanager
def log_step(logger: logging.Logger, step: str) -> Iterator[None]:
    """ثبت شروع، پایان و مدت یک مرحلهٔ اجرا (مثل allocation یا export)."""

    started = perf_counter()
    logger.info("step %s started", step)
    try:
        yield
    except Exception:
        logger.exception("step %s failed", step)
        raise
    logger.info("step %s finished (%.2fs)", step, perf_counter() - started)


__all__ = [
    "DEFAULT_LOGGING_CONFIG",
    "RunContext",
    "RunContextFilter",
    "configure_logging",
    "install_exception_hook",
    "log_step",
    "setup_logging",
]
