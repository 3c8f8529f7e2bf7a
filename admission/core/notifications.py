"""گذرگاه اعلان تغییر وضعیت متقاضی (Core-only، بدون logging).

هر مشترک یک callable با امضای ``(name, status, detail)`` است و به ترتیب اشتراک
فراخوانی می‌شود. خطای یک مشترک مانع اجرای بقیه نمی‌شود و در
:class:`PublishReport` ثبت می‌شود تا لایهٔ Infra آن را لاگ کند.

مثال::

    >>> bus = NotificationBus()
    >>> seen = []
    >>> bus.subscribe(lambda name, status, detail: seen.append(name))
    >>> bus.publish("Ana", CandidateStatus.ACCEPTED, "manual confirmation").delivered
    1
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Tuple

from .common.types import CandidateStatus

__all__ = ["Observer", "ObserverFailure", "PublishReport", "NotificationBus"]

Observer = Callable[[str, CandidateStatus, str], None]


@dataclass(frozen=True, slots=True)
class ObserverFailure:
    """خطای یک مشترک هنگام دریافت اعلان."""

    observer: Observer
    error: Exception


@dataclass(frozen=True, slots=True)
class PublishReport:
    """خلاصهٔ تحویل یک اعلان به مشترکان."""

    name: str
    status: CandidateStatus
    detail: str
    delivered: int = 0
    failures: Tuple[ObserverFailure, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.failures


class NotificationBus:
    """پخش همگام اعلان‌ها با جداسازی خطای هر مشترک."""

    def __init__(self) -> None:
        self._observers: List[Observer] = []

    def subscribe(self, observer: Observer) -> None:
        if not callable(observer):
            raise TypeError("observer must be callable")
        self._observers.append(observer)

    def unsubscribe(self, observer: Observer) -> bool:
        try:
            self._observers.remove(observer)
        except ValueError:
            return False
        return True

    @property
    def observers(self) -> Tuple[Observer, ...]:
        return tuple(self._observers)

    def publish(self, name: str, status: CandidateStatus, detail: str) -> PublishReport:
        """فراخوانی همهٔ مشترکان به ترتیب اشتراک و بازگرداندن گزارش تحویل."""

        delivered = 0
        failures: List[ObserverFailure] = []
        for observer in tuple(self._observers):
            try:
                observer(name, status, detail)
            except Exception as exc:  # noqa: BLE001 - خطای هر مشترک ایزوله می‌شود
                failures.append(ObserverFailure(observer=observer, error=exc))
            else:
                delivered += 1
        return PublishReport(
            name=name,
            status=status,
            detail=detail,
            delivered=delivered,
            failures=tuple(failures),
        )
