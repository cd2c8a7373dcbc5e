# distribution_dashboard/core/order_status.py
"""Order status state machine.

pending -> processing -> picked -> packed -> out_for_delivery -> delivered,
with cancelled reachable from any non-terminal status. Delivered and
cancelled are terminal.
"""
from typing import Dict, List, Optional, Union

from distribution_dashboard.models import OrderStatus
from distribution_dashboard.exceptions import StatusTransitionError

STATUS_FLOW = [
    OrderStatus.PENDING,
    OrderStatus.PROCESSING,
    OrderStatus.PICKED,
    OrderStatus.PACKED,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.DELIVERED,
]

TERMINAL_STATUSES = frozenset([OrderStatus.DELIVERED, OrderStatus.CANCELLED])

OPEN_STATUSES = frozenset(STATUS_FLOW) - TERMINAL_STATUSES


def to_status(status: Union[OrderStatus, str]) -> OrderStatus:
    """Coerce a string or enum to an OrderStatus."""
    if isinstance(status, OrderStatus):
        return status
    return OrderStatus.from_string(status)


def is_terminal(status: Union[OrderStatus, str]) -> bool:
    """Check whether a status is delivered or cancelled."""
    return to_status(status) in TERMINAL_STATUSES


def next_status(status: Union[OrderStatus, str]) -> Optional[OrderStatus]:
    """Get the next status along the flow.

    Returns:
        Next status, or None for terminal statuses
    """
    status = to_status(status)
    if status in TERMINAL_STATUSES:
        return None

    return STATUS_FLOW[STATUS_FLOW.index(status) + 1]


def can_transition(current: Union[OrderStatus, str], new: Union[OrderStatus, str]) -> bool:
    """Check whether a status transition is allowed."""
    try:
        validate_transition(current, new)
    except StatusTransitionError:
        return False
    return True


def validate_transition(current: Union[OrderStatus, str], new: Union[OrderStatus, str]) -> OrderStatus:
    """Validate an order status transition.

    Any strictly forward move along the flow is accepted, as is cancelling a
    non-terminal order.

    Args:
        current: Current status
        new: Requested status

    Returns:
        The requested status

    Raises:
        StatusTransitionError: If the order is in a terminal status, the move
            goes backward, or the status does not change
        ValueError: If either status is unknown
    """
    current = to_status(current)
    new = to_status(new)
    details = {'from': current.value, 'to': new.value}

    if current in TERMINAL_STATUSES:
        raise StatusTransitionError(
            f"Order is already {current.value}; it cannot move to {new.value}",
            code='TERMINAL_STATUS',
            details=details
        )

    if new == current:
        raise StatusTransitionError(
            f"Order is already {current.value}",
            code='NO_CHANGE',
            details=details
        )

    if new == OrderStatus.CANCELLED:
        return new

    if STATUS_FLOW.index(new) < STATUS_FLOW.index(current):
        raise StatusTransitionError(
            f"Order cannot move back from {current.value} to {new.value}",
            code='BACKWARD',
            details=details
        )

    return new


def tracking_steps(status: Union[OrderStatus, str]) -> List[Dict]:
    """Build the tracking timeline for an order.

    A cancelled order has no completed steps.

    Returns:
        One entry per linear status with completed/current flags
    """
    status = to_status(status)
    current_index = STATUS_FLOW.index(status) if status in STATUS_FLOW else -1

    return [
        {
            'status': step.value,
            'label': step.label,
            'completed': index <= current_index,
            'current': index == current_index,
        }
        for index, step in enumerate(STATUS_FLOW)
    ]
