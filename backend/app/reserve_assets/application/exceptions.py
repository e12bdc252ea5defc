"""Application-layer exceptions for asset pricing and collateral handling.

These exceptions represent the failure taxonomy of the asset layer.
Price-path failures are recoverable by the caller choosing the fallback
path; status-affecting faults are absorbed by refresh(); claim failures
are surfaced verbatim. The presentation layer maps them to HTTP errors.
"""


class ApplicationError(Exception):
    """Base class for all application-layer exceptions."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class PriceUnavailableError(ApplicationError):
    """Raised when the strict price path cannot produce a value."""

    def __init__(self, feed_name: str, reason: str, code: str = "PRICE_UNAVAILABLE") -> None:
        super().__init__(
            message=f"Price unavailable from '{feed_name}': {reason}",
            code=code,
        )
        self.feed_name = feed_name
        self.reason = reason


class StalePriceError(PriceUnavailableError):
    """Raised when a feed answer is older than the oracle timeout or incomplete."""

    def __init__(self, feed_name: str, reason: str) -> None:
        super().__init__(feed_name, reason, code="STALE_PRICE")


class PriceOutsideRangeError(PriceUnavailableError):
    """Raised when a feed reports a value that cannot be a price (negative)."""

    def __init__(self, feed_name: str, answer: int) -> None:
        super().__init__(feed_name, f"answer {answer} is outside the valid range", code="PRICE_OUTSIDE_RANGE")
        self.answer = answer


class NoFallbackAvailableError(ApplicationError):
    """Raised when both the strict and every fallback price path failed."""

    def __init__(self, asset_symbol: str) -> None:
        super().__init__(
            message=f"No strict or fallback price available for '{asset_symbol}'",
            code="NO_FALLBACK_AVAILABLE",
        )
        self.asset_symbol = asset_symbol


class RefreshInvariantViolation(ApplicationError):
    """Internal condition detected during refresh() that proves a default.

    Never propagated out of refresh(); always converted to DISABLED.
    """

    def __init__(self, erc20: str, detail: str) -> None:
        super().__init__(
            message=f"Refresh invariant violated for {erc20}: {detail}",
            code="REFRESH_INVARIANT_VIOLATION",
        )
        self.erc20 = erc20
        self.detail = detail


class ClaimDelegationFailure(ApplicationError):
    """Raised when a reward-claim target rejects or cannot execute the call.

    Attributes:
        claimed: RewardsClaimed events for calls that completed before
            the failing one; empty when nothing reached the holder.
    """

    def __init__(self, target: str, reason: str) -> None:
        super().__init__(
            message=f"Reward claim via {target} failed: {reason}",
            code="CLAIM_DELEGATION_FAILURE",
        )
        self.target = target
        self.reason = reason
        self.claimed: list = []


class ClaimInProgressError(ApplicationError):
    """Raised when a claim sequence is re-entered while one is running."""

    def __init__(self) -> None:
        super().__init__(
            message="A reward claim sequence is already in progress",
            code="CLAIM_IN_PROGRESS",
        )


class InvalidAssetConfigError(ApplicationError):
    """Raised when an asset cannot be admitted with the given configuration."""

    def __init__(self, symbol: str, reason: str) -> None:
        super().__init__(
            message=f"Invalid configuration for asset '{symbol}': {reason}",
            code="INVALID_ASSET_CONFIG",
        )
        self.symbol = symbol
        self.reason = reason


class AssetNotFoundError(ApplicationError):
    """Raised when a requested asset is not registered."""

    def __init__(self, identifier: str) -> None:
        super().__init__(
            message=f"Asset '{identifier}' is not registered",
            code="ASSET_NOT_FOUND",
        )
        self.identifier = identifier


class NotCollateralError(ApplicationError):
    """Raised when a collateral-only operation targets a plain asset.

    Plain assets (e.g. reward tokens) have no status or exchange rates.
    """

    def __init__(self, identifier: str) -> None:
        super().__init__(
            message=f"Asset '{identifier}' is not collateral",
            code="NOT_COLLATERAL",
        )
        self.identifier = identifier
