from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from apps.orders.domain.state_machine import track
from apps.orders.services.order_service import OrderService


@dataclass(frozen=True)
class TrackOrderCommand:
    order_id: str
    user: object


@dataclass(frozen=True)
class TrackOrderResult:
    progress: int
    message: str
    estimated_delivery: datetime | None
    delivered_at: datetime | None
    assigned_to: object | None


class TrackOrderUseCase:
    @staticmethod
    def execute(cmd: TrackOrderCommand) -> TrackOrderResult:
        order = OrderService.get_for_user(order_id=cmd.order_id, user=cmd.user)
        info = track(order.order_status)
        return TrackOrderResult(
            progress=info.progress,
            message=info.message,
            estimated_delivery=order.estimated_delivery,
            delivered_at=order.delivered_at,
            assigned_to=order.assigned_to,
        )
