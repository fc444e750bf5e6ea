# boutique/core/notifications.py
"""
Order status notifications.

The email itself is rendered and sent by the `send-order-email` Supabase
Edge Function; this module only builds its request body and invokes it.

Request body:

    {
      "customerName": "Ayesha",
      "customerEmail": "ayesha@example.com",
      "orderId": "5c1f...",
      "status": "accepted" | "rejected",
      "items": [{"title": "...", "quantity": 2, "price": 500.0}],
      "total": 800.0
    }
"""
from __future__ import annotations

import logging
from typing import Any, Callable

from supabase import Client

from boutique.core.config import get_settings
from boutique.core.supabase_client import functions_client
from boutique.models.order import Order, OrderItem

logger = logging.getLogger(__name__)

NOTIFIABLE_STATUSES = {"accepted", "rejected"}


def build_order_email_payload(order: Order, items: list[OrderItem]) -> dict[str, Any]:
    return {
        "customerName": order.customer_name,
        "customerEmail": order.customer_email,
        "orderId": str(order.id),
        "status": order.status,
        "items": [
            {
                "title": f"{it.title} ({it.variant})" if it.variant else it.title,
                "quantity": it.quantity,
                "price": float(it.unit_price),
            }
            for it in items
        ],
        "total": float(order.total_amount),
    }


class OrderNotifier:
    """
    Fire-and-forget dispatch of order status emails.

    `notify` never raises: the status change that triggered it is already
    committed and must stand even if the email cannot be sent.
    """

    def __init__(
        self,
        client_factory: Callable[[], Client] = functions_client,
        function_name: str | None = None,
    ):
        self.client_factory = client_factory
        self.function_name = function_name or get_settings().ORDER_EMAIL_FUNCTION

    def notify(self, payload: dict[str, Any]) -> bool:
        """
        Send one email; `payload` comes from build_order_email_payload.
        """
        if payload["status"] not in NOTIFIABLE_STATUSES:
            logger.debug(
                "No notification for order %s in status %s",
                payload["orderId"],
                payload["status"],
            )
            return False

        try:
            self.client_factory().functions.invoke(
                self.function_name,
                invoke_options={"body": payload},
            )
        except Exception:
            logger.exception(
                "Failed to send %s email for order %s to %s",
                payload["status"],
                payload["orderId"],
                payload["customerEmail"],
            )
            return False

        logger.info(
            "Sent %s email for order %s to %s",
            payload["status"],
            payload["orderId"],
            payload["customerEmail"],
        )
        return True


def get_notifier() -> OrderNotifier:
    """
    FastAPI dependency; overridden in tests.
    """
    return OrderNotifier()
