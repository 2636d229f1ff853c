from typing import Any, Optional


class ProvisioningError(Exception):
    """Base class for errors raised by the order and provisioning core."""

    status_code = 500

    def __init__(self, message: str, *, order_id: Optional[int] = None, stage: Optional[str] = None, **context: Any):
        super().__init__(message)
        self.message = message
        self.order_id = order_id
        self.stage = stage
        self.context = context

    def to_detail(self) -> dict:
        detail = {"message": self.message}
        if self.order_id is not None:
            detail["order_id"] = self.order_id
        if self.stage:
            detail["stage"] = self.stage
        detail.update(self.context)
        return detail


class ValidationError(ProvisioningError):
    """Malformed or incomplete input, or a transition from a terminal state."""

    status_code = 400


class NotFoundError(ProvisioningError):
    status_code = 404


class AuthorizationError(ProvisioningError):
    status_code = 403


class PersistenceError(ProvisioningError):
    """The store rejected or failed a statement. Nothing was committed."""

    status_code = 500


class PartialProvisioningError(ProvisioningError):
    """
    The order could not be activated together with its user product.
    The transaction is rolled back, so the order is left pending; the failure is
    logged with the order id for manual follow-up.
    """

    status_code = 500
