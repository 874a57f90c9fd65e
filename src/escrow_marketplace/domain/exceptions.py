"""Domain exceptions for the escrow marketplace.

Every rejection terminates the triggering operation with no state change.
Each error carries a machine-readable ``code`` so callers can distinguish
the reason without parsing messages.
"""


class MarketplaceError(Exception):
    """Base exception for all domain errors."""

    def __init__(self, message: str, code: str = "MARKETPLACE_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


# --- Listing Errors ---


class InvalidPriceError(MarketplaceError):
    """Raised when a listing is created or resold with a non-positive price."""

    def __init__(self, price: int) -> None:
        super().__init__(
            message=f"Invalid price: {price} (must be greater than zero)",
            code="INVALID_PRICE",
        )
        self.price = price


class NotForSaleError(MarketplaceError):
    """Raised when a listing is absent, already sold or aborted."""

    def __init__(self, listing_id: int) -> None:
        super().__init__(
            message=f"Listing not for sale: {listing_id}",
            code="NOT_FOR_SALE",
        )
        self.listing_id = listing_id


class IncorrectAmountError(MarketplaceError):
    """Raised when the amount sent does not equal the listing price exactly."""

    def __init__(self, listing_id: int, expected: int, received: int) -> None:
        super().__init__(
            message=(
                f"Incorrect amount for listing {listing_id}: "
                f"expected {expected}, received {received}"
            ),
            code="INCORRECT_AMOUNT",
        )
        self.listing_id = listing_id
        self.expected = expected
        self.received = received


class AlreadyWithdrawnError(MarketplaceError):
    """Raised when a balance is withdrawn after it has been zeroed."""

    def __init__(self, listing_id: int, balance: str = "payment") -> None:
        super().__init__(
            message=f"Already withdrawn: {balance} for listing {listing_id}",
            code="ALREADY_WITHDRAWN",
        )
        self.listing_id = listing_id
        self.balance = balance


class ListingNotFoundError(MarketplaceError):
    """Raised by read queries when a listing id does not exist."""

    def __init__(self, listing_id: int) -> None:
        super().__init__(
            message=f"Listing not found: {listing_id}",
            code="LISTING_NOT_FOUND",
        )
        self.listing_id = listing_id


class InvalidPayloadError(MarketplaceError):
    """Raised when a custody-transfer payload cannot be read as sale data."""

    def __init__(self, message: str) -> None:
        super().__init__(message=message, code="INVALID_PAYLOAD")


# --- Authorization Errors ---


class NotAuthorizedError(MarketplaceError):
    """Raised when the caller lacks the role required for an operation."""

    def __init__(self, caller: str, action: str) -> None:
        super().__init__(
            message=f"Not authorized: {caller} cannot {action}",
            code="NOT_AUTHORIZED",
        )
        self.caller = caller
        self.action = action


class UnauthorizedTransferError(NotAuthorizedError):
    """Raised by the asset registry when a transfer caller is neither owner nor approved."""

    def __init__(self, caller: str, asset_id: int) -> None:
        super().__init__(caller=caller, action=f"transfer asset {asset_id}")
        self.code = "UNAUTHORIZED_TRANSFER"
        self.asset_id = asset_id


# --- State Machine Errors ---


class InvalidStateTransitionError(MarketplaceError):
    """Raised when an attempted lifecycle transition is not allowed.

    Example: SOLD -> ABORTED (the asset has already left escrow).
    """

    def __init__(self, current_state: str, attempted_event: str) -> None:
        super().__init__(
            message=f"Invalid state transition: {attempted_event} from {current_state}",
            code="INVALID_STATE_TRANSITION",
        )
        self.current_state = current_state
        self.attempted_event = attempted_event


# --- Collaborator Errors ---


class AssetNotFoundError(MarketplaceError):
    """Raised when the asset registry has no record of an asset id."""

    def __init__(self, asset_id: int) -> None:
        super().__init__(
            message=f"Asset not found: {asset_id}",
            code="ASSET_NOT_FOUND",
        )
        self.asset_id = asset_id


class InsufficientFundsError(MarketplaceError):
    """Raised when an account cannot cover a currency movement."""

    def __init__(self, account: str, required: int, available: int) -> None:
        super().__init__(
            message=(
                f"Insufficient funds for {account}: "
                f"required {required}, available {available}"
            ),
            code="INSUFFICIENT_FUNDS",
        )
        self.account = account
        self.required = required
        self.available = available
