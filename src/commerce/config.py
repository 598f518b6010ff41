"""Runtime settings for the storefront.

Protean's own configuration (providers, processing mode) lives in
``domain.toml``. Everything else the service needs from its environment is
gathered here once, at startup, and handed to the components that use it.
"""

import os
from dataclasses import dataclass, field

DEFAULT_ALLOWED_ORIGINS = ("https://allee-ai.com",)
DEFAULT_FRONTEND_URL = "http://localhost:5173"


def _split_origins(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return DEFAULT_ALLOWED_ORIGINS
    origins = tuple(origin.strip() for origin in raw.split(",") if origin.strip())
    return origins or DEFAULT_ALLOWED_ORIGINS


@dataclass(frozen=True)
class StoreSettings:
    environment: str = "development"
    stripe_secret_key: str | None = None
    stripe_webhook_secret: str = ""
    admin_api_key: str | None = None
    frontend_url: str = DEFAULT_FRONTEND_URL
    allowed_origins: tuple[str, ...] = field(default=DEFAULT_ALLOWED_ORIGINS)
    payment_gateway: str = "fake"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def success_url(self) -> str:
        # Stripe substitutes the placeholder when redirecting the customer back
        return f"{self.frontend_url}/checkout/success?session_id={{CHECKOUT_SESSION_ID}}"

    @property
    def cancel_url(self) -> str:
        return f"{self.frontend_url}/checkout/cancel"

    @classmethod
    def from_env(cls, environ=None) -> "StoreSettings":
        """Build settings from environment variables.

        ``PAYMENT_GATEWAY`` picks the adapter explicitly. Without it, a
        configured ``STRIPE_SECRET_KEY`` selects Stripe and anything else
        falls back to the in-process fake gateway.
        """
        env = os.environ if environ is None else environ

        secret_key = env.get("STRIPE_SECRET_KEY") or None
        gateway = env.get("PAYMENT_GATEWAY") or ("stripe" if secret_key else "fake")

        return cls(
            environment=(env.get("PROTEAN_ENV") or "development").lower(),
            stripe_secret_key=secret_key,
            stripe_webhook_secret=env.get("STRIPE_WEBHOOK_SECRET", ""),
            admin_api_key=env.get("ADMIN_API_KEY") or None,
            frontend_url=(env.get("FRONTEND_URL") or DEFAULT_FRONTEND_URL).rstrip("/"),
            allowed_origins=_split_origins(env.get("ALLOWED_ORIGINS")),
            payment_gateway=gateway.lower(),
        )
