"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state: no cross-user sharing.
State tracks ids returned by the API so follow-up requests can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class CatalogState:
    """Products this user created or discovered."""

    product_ids: list[str] = field(default_factory=list)


@dataclass
class CheckoutState:
    """Tracks state for a single checkout → webhook → order lifecycle."""

    order_id: str | None = None
    session_id: str | None = None
    payment_intent_id: str | None = None
    current_status: str = "PENDING"
