"""Booking and payment status transitions.

Every status write on a Booking goes through ``apply``; endpoints never set
``status`` or ``payment_status`` directly.
"""
from datetime import datetime

BOOKING_STATUSES = ("pending", "confirmed", "cancelled", "completed")
PAYMENT_STATUSES = ("pending", "completed", "failed", "refunded")

# action -> (payment statuses it may start from, new payment status, new booking status)
TRANSITIONS = {
    "confirm_payment": (("pending", "failed", "completed"), "completed", "confirmed"),
    "fail_payment": (("pending", "failed"), "failed", "pending"),
    "refund": (("completed",), "refunded", "cancelled"),
    "check_in": (("completed",), "completed", "completed"),
}

# messages for the common illegal moves, keyed by (action, current payment status)
_REJECTIONS = {
    ("refund", "refunded"): "Payment already refunded",
    ("refund", "pending"): "Payment not completed",
    ("refund", "failed"): "Payment not completed",
    ("confirm_payment", "refunded"): "Payment already refunded",
    ("fail_payment", "completed"): "Payment already completed",
    ("fail_payment", "refunded"): "Payment already refunded",
    ("check_in", "refunded"): "Booking has been cancelled",
}


class InvalidTransition(Exception):
    def __init__(self, message, action=None, current=None):
        super().__init__(message)
        self.message = message
        self.action = action
        self.current = current


def apply(booking, action, now=None):
    """Move ``booking`` through ``action`` and stamp the matching timestamp.

    Raises InvalidTransition when the booking's current state does not allow it.
    """
    if action not in TRANSITIONS:
        raise InvalidTransition(f"Unknown action: {action}", action=action)

    allowed_from, payment_status, booking_status = TRANSITIONS[action]
    current = booking.payment_status or "pending"

    if current not in allowed_from:
        message = _REJECTIONS.get((action, current), f"Cannot {action.replace('_', ' ')} a booking with payment {current}")
        raise InvalidTransition(message, action=action, current=current)

    if action == "check_in":
        if booking.status == "completed":
            raise InvalidTransition("Ticket already used", action=action, current=booking.status)
        if booking.status != "confirmed":
            raise InvalidTransition("Booking is not confirmed", action=action, current=booking.status)

    now = now or datetime.utcnow()
    if action == "confirm_payment" and current == "completed":
        # already confirmed, keep the first payment date
        return booking

    booking.payment_status = payment_status
    booking.status = booking_status

    if action == "confirm_payment":
        booking.payment_date = now
    elif action == "refund":
        booking.refund_date = now
    elif action == "check_in":
        booking.checked_in_at = now
    return booking
