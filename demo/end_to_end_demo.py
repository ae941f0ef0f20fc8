"""
End-to-End Demo: Order Pricing Workflow

This demonstrates the complete workflow:
1. Validate the incoming order
2. Price the order (flaky step, retried with exponential backoff)
3. Apply a discount when the order is large
4. Look up stock and shipping estimates in parallel
5. Report lifecycle events and metrics

Everything runs in memory.
"""
import asyncio

from pydantic import BaseModel

from orchestration import (
    Backoff,
    BackoffKind,
    ConditionBranch,
    Event,
    InMemoryEventBus,
    LoggingMetricsCollector,
    PydanticValidator,
    RetryConfig,
    Workflow,
    create_workflow,
)


class OrderInput(BaseModel):
    order_id: str
    quantity: int
    unit_price: float


class FlakyPricingService:
    """Pricing service that is unavailable for its first ``outages`` calls."""

    def __init__(self, outages: int = 2) -> None:
        self.outages = outages
        self.calls = 0

    async def __call__(self, context: dict) -> None:
        self.calls += 1
        if self.calls <= self.outages:
            raise ConnectionError(f"pricing service unavailable (call {self.calls})")
        context["total"] = context["quantity"] * context["unit_price"]


def apply_discount(context: dict) -> None:
    context["total"] = round(context["total"] * 0.9, 2)
    context["discounted"] = True


async def check_stock(context: dict) -> None:
    await asyncio.sleep(0.05)
    context["in_stock"] = True


async def estimate_shipping(context: dict) -> None:
    await asyncio.sleep(0.08)
    context["shipping_days"] = 2 if context["quantity"] < 100 else 5


async def print_event(event: Event) -> None:
    print(f"  event: {event.name} {event.payload}")


def build_workflow(bus: InMemoryEventBus) -> Workflow:
    discount = Workflow("discount").add_step("apply_discount", apply_discount)

    workflow = create_workflow(
        "order_pricing",
        event_bus=bus,
        metrics_collector=LoggingMetricsCollector(),
        validator=PydanticValidator(OrderInput),
    )
    return (
        workflow.add_step(
            "price_order",
            FlakyPricingService(outages=2),
            retries=RetryConfig(
                max_attempts=5,
                backoff=Backoff(BackoffKind.EXPONENTIAL, 0.05),
                should_retry=lambda exc: isinstance(exc, ConnectionError),
            ),
        )
        .add_condition(
            [ConditionBranch("large_order", lambda ctx: ctx["total"] > 500, discount)]
        )
        .parallel(
            [
                Workflow("stock").add_step("check_stock", check_stock),
                Workflow("shipping").add_step("estimate_shipping", estimate_shipping),
            ]
        )
    )


async def main() -> None:
    print("\n" + "=" * 80)
    print("DEMO: Order Pricing Workflow")
    print("=" * 80 + "\n")

    bus = InMemoryEventBus()
    for name in (
        "workflow.started",
        "workflow.step.started",
        "workflow.step.succeeded",
        "workflow.step.failed",
        "workflow.finished",
    ):
        bus.subscribe(name, print_event)

    workflow = build_workflow(bus)
    result = await workflow.execute({"order_id": "ORD-1", "quantity": 60, "unit_price": 12.5})

    print("\nResult:")
    for key, value in result.items():
        print(f"  {key}: {value}")


if __name__ == "__main__":
    asyncio.run(main())
