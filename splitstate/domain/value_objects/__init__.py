"""Domain value objects."""

from splitstate.domain.value_objects.order_item import OrderItem

__all__ = ["OrderItem"]
