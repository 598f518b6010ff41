"""Webhook reconciliation: verified gateway events to order and stock changes."""

import structlog
from protean.utils.globals import current_domain

from commerce.exceptions import ProcessingError
from commerce.gateway.events import GatewayEvent, UnhandledEvent
from commerce.gateway.port import PaymentGateway
from commerce.utils.logging import add_context

logger = structlog.get_logger(__name__)


class WebhookReconciler:
    def __init__(self, gateway: PaymentGateway) -> None:
        self.gateway = gateway

    def reconcile(self, payload: bytes, signature: str) -> GatewayEvent:
        """Verify, parse and apply one webhook delivery.

        Signature failures surface as ``AuthenticationError`` before anything is
        read from the payload. Business no-ops (unknown order, repeated event,
        unsupported type) return normally so the provider stops redelivering.
        Anything else that goes wrong is a ``ProcessingError`` and leaves no
        partial changes behind.
        """
        event = self.gateway.construct_event(payload, signature)
        add_context(gateway_event_id=event.event_id, gateway_event_type=event.event_type)

        command = event.to_command()
        if command is None:
            reason = event.reason if isinstance(event, UnhandledEvent) else "no action"
            logger.info("gateway_event_ignored", reason=reason)
            return event

        try:
            current_domain.process(command, asynchronous=False)
        except Exception as exc:
            logger.exception("gateway_event_failed")
            raise ProcessingError("Webhook processing failed") from exc

        logger.info("gateway_event_applied")
        return event
