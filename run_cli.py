"""Entry-point ساده برای اجرای CLI از ریشهٔ مخزن."""

from __future__ import annotations

from admission.infra.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
