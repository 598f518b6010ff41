"""Commerce bounded context: catalog, orders and payment reconciliation.

Products and orders live in one domain so that a webhook's order transition
and the stock adjustments it implies share a single Unit of Work.
"""

from protean.domain import Domain

from commerce.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

commerce = Domain(name="commerce")
