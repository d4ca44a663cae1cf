"""Order domain errors.

Defines order-specific rejection reasons for business-rule violations.

Architecture:
    - Domain layer errors (no infrastructure dependencies)
    - Used in Result types (railway-oriented programming)
    - Never raised as exceptions (return Failure(error) instead)

Usage:
    from splitstate.domain.errors import OrderError

    result = order.change_status(OrderStatus.SHIPPED)
    match result:
        case Failure(error=OrderError.INVALID_STATUS_TRANSITION):
            ...
"""


class OrderError:
    """Order error constants.

    Error Categories:
        - Validation errors: NO_ITEMS, INVALID_QUANTITY, INVALID_PRICE, INVALID_SKU
        - State errors: INVALID_STATUS_TRANSITION, ORDER_LOCKED, ORDER_DELETED
        - Identity errors: ORDER_ALREADY_EXISTS, INVALID_CUSTOMER
    """

    NO_ITEMS = "Order must contain at least one item"
    INVALID_QUANTITY = "Item quantity must be positive"
    INVALID_PRICE = "Item unit price must not be negative"
    INVALID_SKU = "Item SKU must not be empty"
    INVALID_CUSTOMER = "Customer id must not be empty"
    INVALID_STATUS_TRANSITION = "Invalid order status transition"
    ORDER_LOCKED = "Items cannot be changed once an order is shipped, delivered or cancelled"
    ORDER_DELETED = "Order has been deleted"
    ORDER_ALREADY_EXISTS = "Order already exists"
