"""Request-scoped error taxonomy for the redemption flow."""


class RedemptionError(Exception):
    """Base error carrying a short client-facing message."""

    default_message = "Redeem not available"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ClientInputError(RedemptionError):
    """Missing or invalid input, or a stale selection."""


class IneligibleError(ClientInputError):
    """The owner holds no qualifying asset or cannot cover the fee."""


class ResolutionError(RedemptionError):
    """An RPC or index lookup failed; the client may retry the step."""

    default_message = "Redeem not available, please try again later"


class CompositionError(RedemptionError):
    """A transaction could not be assembled."""

    default_message = "Redeem not available, please try again later"


class PersistenceError(RedemptionError):
    """The shipment ledger rejected a write."""

    default_message = "Redeem not available, please try again later"
