"""قراردادهای مشترک Core: وضعیت‌ها، کد دسته‌ها، دلایل و خطاها."""
