"""سیستم تخصیص صندلی رشته‌های دانشگاهی به متقاضیان رتبه‌بندی‌شده."""

__version__ = "1.0.0"
__description__ = "سیستم تخصیص صندلی پذیرش"
