class QuickBillError(Exception):
    """Base class for domain errors raised by the billing core."""


class InvalidInput(QuickBillError):
    """Negative price, non-positive quantity, bad tax rate or package charge."""


class InvalidTransition(QuickBillError):
    def __init__(self, current, requested):
        self.current = current
        self.requested = requested
        super().__init__(
            f"Order status cannot change from '{_value(current)}' to '{_value(requested)}'"
        )


def _value(status) -> str:
    return getattr(status, "value", str(status))
