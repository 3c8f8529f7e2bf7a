"""رابط خط فرمان headless و منوی تعاملی برای تخصیص صندلی.

این ماژول کلیهٔ مسئولیت‌های I/O (خواندن پیکربندی و متقاضیان، چاپ جدول‌ها،
نوشتن Excel و logging) را بر عهده دارد و Core را فقط فراخوانی می‌کند. هیچ وضعیتی
بین دو اجرا نگه داشته نمی‌شود.

مثال::

    >>> from admission.infra import cli
    >>> cli.main(["run", "--override", "7=rejected", "--output", "out.xlsx"])  # doctest: +SKIP
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Sequence, TextIO, Tuple

from admission import __version__
from admission.core.allocation.engine import AllocationEngine, OverrideResult
from admission.core.allocation.report import (
    build_candidate_frame,
    build_capacity_frame,
    build_program_summary,
)
from admission.core.allocation.trace import AllocationTraceRecord, trace_to_frame
from admission.core.candidate import Candidate
from admission.core.catalog import ProgramCatalog
from admission.core.common.errors import DomainError
from admission.core.common.types import CandidateStatus
from admission.core.config import DEFAULT_CONFIG, AdmissionConfig, build_catalog
from admission.core.notifications import NotificationBus, PublishReport
from admission.core.qa.invariants import run_all_invariants
from admission.core.registry import CandidateRegistry
from admission.infra.errors import InfraError
from admission.infra.io_utils import (
    DEFAULT_CONFIG_PATH,
    format_table,
    load_admission_config,
    read_candidates_csv,
    write_xlsx_atomic,
)
from admission.infra.logging import (
    DEFAULT_LOGGING_CONFIG,
    RunContext,
    configure_logging,
    install_exception_hook,
    log_step,
)
from admission.infra.seed import build_default_candidates

InputFn = Callable[[str], str]
OverrideSpec = Tuple[int, CandidateStatus]

logger = logging.getLogger("admission.cli")

_RESTORE_EXCEPTION_HOOK: Callable[[], None] | None = None

_MENU = (
    "\n--- ADMISSION SYSTEM 2025 ---\n"
    "1. List candidates (categories, scores and status)\n"
    "2. Change status (manual)\n"
    "3. Exit"
)


@dataclass
class AdmissionSession:
    """زمینهٔ سطح‌بالای یک اجرا؛ رجیستری و کاتالوگ فقط یک بار ساخته می‌شوند."""

    catalog: ProgramCatalog
    registry: CandidateRegistry
    engine: AllocationEngine
    trace: List[AllocationTraceRecord] = field(default_factory=list)


def _log_notification(name: str, status: CandidateStatus, detail: str) -> None:
    logger.info("notification: %s -> %s (%s)", name, status.value, detail)


def _console_observer(stream: TextIO) -> Callable[[str, CandidateStatus, str], None]:
    def _notify(name: str, status: CandidateStatus, detail: str) -> None:
        print(f"\n[OBSERVER] Notification: {name} -> {status.value}. {detail}", file=stream)

    return _notify


def _log_delivery(report: PublishReport | None) -> None:
    if report is None:
        return
    for failure in report.failures:
        logger.error(
            "observer %r failed for %s: %s",
            failure.observer,
            report.name,
            failure.error,
            exc_info=failure.error,
        )


def _progress_logger(pct: int, message: str) -> None:
    logger.debug("%3d%% | %s", pct, message)


def build_session(
    config: AdmissionConfig,
    candidates: Sequence[Candidate],
    *,
    observers: Sequence[Callable[[str, CandidateStatus, str], None]] = (),
) -> AdmissionSession:
    """ساخت کاتالوگ، رجیستری و Engine و اجرای تخصیص خودکار."""

    catalog = build_catalog(config)
    registry = CandidateRegistry(candidates)
    bus = NotificationBus()
    bus.subscribe(_log_notification)
    for observer in observers:
        bus.subscribe(observer)
    session = AdmissionSession(
        catalog=catalog,
        registry=registry,
        engine=AllocationEngine(catalog, registry, bus),
    )
    with log_step(logger, "allocation"):
        session.engine.run_batch(
            registry.list_all(), progress=_progress_logger, trace=session.trace
        )
    accepted = sum(
        1 for candidate in registry if candidate.status is CandidateStatus.ACCEPTED
    )
    logger.info("batch allocated %d of %d candidates", accepted, len(registry))
    return session


def apply_override(session: AdmissionSession, candidate_id: int, status: CandidateStatus) -> OverrideResult:
    result = session.engine.override_status(candidate_id, status)
    _log_delivery(result.delivery)
    if result.ok:
        logger.info("override %s -> %s", candidate_id, status.value)
    else:
        logger.warning("override %s rejected: %s", candidate_id, result.code.value)
    return result


def _parse_override(text: str) -> OverrideSpec:
    raw_id, sep, raw_status = str(text).partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected ID=STATUS, got '{text}'")
    try:
        return int(raw_id.strip()), CandidateStatus.from_value(raw_status)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _load_candidates(path: str | None) -> List[Candidate]:
    if path:
        return read_candidates_csv(path)
    return build_default_candidates()


def _print_reports(session: AdmissionSession, stream: TextIO) -> None:
    candidates = session.registry.list_all()
    print(format_table(build_candidate_frame(candidates)), file=stream)
    print("", file=stream)
    print(format_table(build_capacity_frame(session.catalog, candidates)), file=stream)
    print("", file=stream)
    print(format_table(build_program_summary(session.catalog, candidates)), file=stream)


def _run_command(args: argparse.Namespace, config: AdmissionConfig, stream: TextIO) -> int:
    session = build_session(config, _load_candidates(args.candidates))

    for candidate_id, status in args.overrides:
        result = apply_override(session, candidate_id, status)
        print(f">> {candidate_id}: {result.message}", file=stream)

    _print_reports(session, stream)
    candidates = session.registry.list_all()
    report = run_all_invariants(session.catalog, candidates)
    if args.show_trace:
        print("", file=stream)
        print(format_table(trace_to_frame(session.trace)), file=stream)

    if args.output:
        with log_step(logger, "export"):
            path = write_xlsx_atomic(
                {
                    "candidates": build_candidate_frame(candidates),
                    "capacity": build_capacity_frame(session.catalog, candidates),
                    "programs": build_program_summary(session.catalog, candidates),
                    "trace": trace_to_frame(session.trace),
                    "qa": report.to_summary_frame(),
                    "qa_violations": report.to_violation_frame(),
                },
                args.output,
            )
        print(f"report written to {path}", file=stream)

    if not report.passed:
        for violation in report.violations:
            logger.error("QA %s: %s", violation.rule_id, violation.message)
        return 1
    return 0


def _interactive_command(
    args: argparse.Namespace,
    config: AdmissionConfig,
    stream: TextIO,
    input_fn: InputFn,
) -> int:
    session = build_session(
        config,
        _load_candidates(args.candidates),
        observers=(_console_observer(stream),),
    )
    while True:
        print(_MENU, file=stream)
        try:
            option = input_fn("Option: ").strip()
        except EOFError:
            return 0
        if option == "1":
            print(format_table(build_candidate_frame(session.registry.list_all())), file=stream)
        elif option == "2":
            try:
                raw_id = input_fn("ID: ").strip()
                choice = input_fn("1: ACCEPT, 2: REJECT: ").strip()
            except EOFError:
                return 0
            try:
                candidate_id = int(raw_id)
            except ValueError:
                print(f">> invalid id '{raw_id}'", file=stream)
                continue
            status = CandidateStatus.ACCEPTED if choice == "1" else CandidateStatus.REJECTED
            result = apply_override(session, candidate_id, status)
            print(f">> {result.message}", file=stream)
        elif option == "3":
            return 0


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=str(DEFAULT_CONFIG_PATH),
        help="path to admission.json (built-in programs are used if it does not exist)",
    )
    parser.add_argument(
        "--candidates",
        default=None,
        help="CSV with candidate_id,name,score,desired_program[,categories,has_degree]",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Seat admission allocator")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--logging-config",
        default=str(DEFAULT_LOGGING_CONFIG),
        help="logging YAML config",
    )
    parser.add_argument("--log-dir", default=None, help="directory for log files")
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run", help="allocate seats and print reports")
    _add_common_args(run_cmd)
    run_cmd.add_argument(
        "--override",
        dest="overrides",
        action="append",
        type=_parse_override,
        default=[],
        metavar="ID=STATUS",
        help="manual status change applied after the batch (repeatable)",
    )
    run_cmd.add_argument("--output", default=None, help="Excel report path")
    run_cmd.add_argument(
        "--trace", dest="show_trace", action="store_true", help="print allocation trace"
    )

    interactive_cmd = sub.add_parser("interactive", help="menu-driven session")
    _add_common_args(interactive_cmd)
    return parser


def _resolve_config(path: str) -> AdmissionConfig:
    config_path = Path(path)
    if not config_path.exists() and config_path == DEFAULT_CONFIG_PATH:
        return DEFAULT_CONFIG
    return load_admission_config(config_path)


def _install_process_hook(context: RunContext) -> None:
    # hook تا پایان پروسه نصب می‌ماند؛ اجرای دوباره فقط جایگزینش می‌کند.
    global _RESTORE_EXCEPTION_HOOK
    if _RESTORE_EXCEPTION_HOOK is not None:
        _RESTORE_EXCEPTION_HOOK()
    _RESTORE_EXCEPTION_HOOK = install_exception_hook(logger, context)


def main(
    argv: Sequence[str] | None = None,
    *,
    input_fn: InputFn = input,
    stream: TextIO | None = None,
) -> int:
    """نقطهٔ ورود CLI؛ خروجی ۰ به معنای موفقیت است.

    خطاهای دامنه و زیرساخت با کد ۲ برمی‌گردند. هر خطای دیگری بالا می‌رود و
    ``sys.excepthook`` نصب‌شده گزارش آن را در ``<log_dir>/incidents`` می‌نویسد.
    """

    parser = _build_parser()
    args = parser.parse_args(argv)
    out = stream if stream is not None else sys.stdout

    context = configure_logging(
        app_name="AdmissionAllocator",
        app_version=__version__,
        logger_name="admission",
        config_path=args.logging_config,
        log_dir=args.log_dir,
        command=args.command,
    )
    _install_process_hook(context)
    try:
        config = _resolve_config(args.config)
        if args.command == "run":
            return _run_command(args, config, out)
        if args.command == "interactive":
            return _interactive_command(args, config, out, input_fn)
        raise RuntimeError(f"Unsupported command: {args.command}")
    except (DomainError, InfraError) as exc:
        logger.error("%s", exc)
        print(f"❌ {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
