"""Ordering bounded context — client cart and quote-request lifecycle.

Handles the persisted client cart (merchandise and vehicles), its
reconciliation against the live catalogue, and the quote-request order
state machine with its audit trail, internal notes and customer
notifications.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
