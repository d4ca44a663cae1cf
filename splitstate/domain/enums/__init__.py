"""Domain enums."""

from splitstate.domain.enums.order_status import OrderStatus

__all__ = ["OrderStatus"]
