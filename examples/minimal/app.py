"""Minimal example of serving easyflow workflows with Litestar.

This example builds an order processing workflow out of plain functions and
a task class, then exposes it through the WorkflowPlugin REST API.

Run with:
    cd examples/minimal
    litestar run

Then try:
    curl -X POST localhost:8000/workflows/order_processing/run \
        -H 'content-type: application/json' \
        -d '{"input": {"order_id": "A-1", "items": ["book"], "amount": 12}}'
"""

from __future__ import annotations

import asyncio
from typing import Any

from litestar import Litestar, get

from easyflow import Workflow, WorkflowPlugin, WorkflowPluginConfig

# =============================================================================
# Task Definitions
# =============================================================================


def validate_order(order: dict[str, Any], emit_message: Any) -> dict[str, Any]:
    """Reject orders without items."""
    if not order.get("items"):
        msg = f"Order {order.get('order_id')} has no items"
        raise ValueError(msg)
    emit_message(f"validated {len(order['items'])} item(s)")
    return order


async def process_payment(order: dict[str, Any]) -> dict[str, Any]:
    """Charge the order amount."""
    await asyncio.sleep(0)
    return {**order, "payment_id": f"PAY-{order['order_id']}"}


class Fulfillment:
    """Prepare the shipment and notify the customer side by side."""

    name = "Fulfillment"

    def __init__(self) -> None:
        self.parallel = [self.pack, self.notify]

    async def pack(self, order: dict[str, Any], emit_message: Any) -> str:
        emit_message("packing")
        await asyncio.sleep(0.01)
        return f"TRACK-{order['order_id']}"

    def notify(self, order: dict[str, Any]) -> str:
        return f"mail sent for {order['payment_id']}"


# =============================================================================
# Workflow Definition
# =============================================================================

order_processing = Workflow("order_processing")
order_processing.sequence("Checkout", validate_order, process_payment).sequence(Fulfillment)


# =============================================================================
# Application
# =============================================================================


@get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


plugin_config = WorkflowPluginConfig(workflows=[order_processing])

app = Litestar(
    route_handlers=[health_check],
    plugins=[WorkflowPlugin(config=plugin_config)],
    debug=True,
)
