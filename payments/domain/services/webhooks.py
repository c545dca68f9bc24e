# payments/domain/services/webhooks.py
"""
Webhook handler registry.

The payment client verifies and parses the provider's webhook into a
``WebhookEvent``; this module routes the event to every registered handler
that declares support for its type.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from payments.domain.models.payment import WebhookEvent

logger = logging.getLogger("webhooks")


class WebhookHandler(ABC):
    """Abstract webhook handler interface."""

    @abstractmethod
    def supports(self, event_type: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def handle(self, event: WebhookEvent) -> None:
        raise NotImplementedError


class WebhookDispatcher:
    def __init__(self, handlers: list[WebhookHandler] | None = None) -> None:
        self._handlers: list[WebhookHandler] = list(handlers or [])

    @property
    def handlers(self) -> tuple[WebhookHandler, ...]:
        return tuple(self._handlers)

    def register(self, handler: WebhookHandler) -> None:
        self._handlers.append(handler)

    def dispatch(self, event: WebhookEvent) -> int:
        """Run every handler supporting ``event.type`` in registration order.

        Returns the number of handlers invoked. Handler exceptions propagate
        and stop the remaining handlers from running.
        """
        handled = 0
        for handler in self._handlers:
            if not handler.supports(event.type):
                continue
            handler.handle(event)
            handled += 1

        if handled == 0:
            logger.warning("Unhandled webhook event %s (%s)", event.id, event.type)
        else:
            logger.info("Webhook %s (%s) handled by %d handler(s)", event.id, event.type, handled)
        return handled
