"""Human-readable order numbers: ``ANF-YYYYMMDD-XXXXXX``."""

import secrets
from datetime import UTC, datetime

ORDER_NUMBER_PREFIX = "ANF"


def generate_order_number(now: datetime | None = None) -> str:
    now = now or datetime.now(UTC)
    return f"{ORDER_NUMBER_PREFIX}-{now:%Y%m%d}-{secrets.token_hex(3).upper()}"
