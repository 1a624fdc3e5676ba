"""Exception hierarchy for Polymarket client errors.

A base exception class with a specialised API error that carries status
code and message attributes, plus one class per failure of the credential
and trade pipelines.  Pipeline errors carry ``retryable`` and a
``remediation`` hint that user interfaces can show verbatim.
"""


class PolymarketError(Exception):
    """Base exception for all Polymarket client errors."""

    retryable: bool = False
    remediation: str = ""


class PolymarketAPIError(PolymarketError):
    """Error returned by a Polymarket API call.

    Carry a human-readable message and an HTTP status code so callers
    can distinguish transient failures from client errors.

    Args:
        msg: Human-readable description of the error.
        status_code: HTTP status code from the API response.

    """

    def __init__(self, msg: str, status_code: int) -> None:
        """Initialize Polymarket API error.

        Args:
            msg: Human-readable description of the error.
            status_code: HTTP status code from the API response.

        """
        super().__init__(f"[{status_code}] {msg}")
        self.msg = msg
        self.status_code = status_code


class CredentialConflict(PolymarketAPIError):
    """API credentials already exist for the wallet and nonce (HTTP 409)."""


class WalletNotRegistered(PolymarketError):
    """The wallet has never been used on the exchange."""

    remediation = (
        "This wallet hasn't been used on Polymarket yet. "
        "Fund it or complete registration at polymarket.com first."
    )

    def __init__(self, msg: str = "Wallet not registered on Polymarket") -> None:
        """Initialize with an optional message."""
        super().__init__(msg)


class InvalidAddress(PolymarketError):
    """A wallet or funder address is not a 20-byte hex address."""

    remediation = "Check that the address is a 0x-prefixed, 40-character hex address."


class WalletValidationFailed(PolymarketError):
    """The registration check could not be completed."""

    retryable = True
    remediation = "Could not reach the exchange to check the wallet. Try again."


class ClockSyncFailed(PolymarketError):
    """Exchange server time could not be fetched or parsed."""

    retryable = True
    remediation = "Could not fetch exchange server time. Try again."


class UserRejectedSignature(PolymarketError):
    """The wallet owner declined the signature prompt."""

    remediation = "The signature request was rejected in the wallet. Approve it to continue."

    def __init__(self, msg: str = "User rejected the signature request") -> None:
        """Initialize with an optional message."""
        super().__init__(msg)


class CredentialIssuanceFailed(PolymarketError):
    """The exchange refused to create or derive API credentials.

    Server errors (5xx) and transport failures are retryable; client
    errors are not.

    Args:
        msg: Human-readable description of the error.
        status_code: HTTP status code, or ``None`` for transport failures.

    """

    remediation = "Polymarket could not issue API credentials for this wallet."

    def __init__(self, msg: str, status_code: int | None = None) -> None:
        """Initialize credential issuance error.

        Args:
            msg: Human-readable description of the error.
            status_code: HTTP status code, or ``None`` for transport failures.

        """
        super().__init__(msg)
        self.status_code = status_code
        self.retryable = status_code is None or status_code >= 500  # noqa: PLR2004


class FunderUnresolved(PolymarketError):
    """No funder address could be discovered for the wallet.

    This is an expected state for new or unfunded wallets, not a fault.
    ``outage`` is set when every probe failed with a transport error, so
    the result reflects unavailable APIs rather than an empty wallet.

    Args:
        msg: Human-readable description.
        outage: Whether all probes failed with transient errors.

    """

    remediation = "No funded Polymarket wallet was found. Enter your proxy wallet address manually."

    def __init__(self, msg: str = "Funder address unresolved", *, outage: bool = False) -> None:
        """Initialize unresolved funder state.

        Args:
            msg: Human-readable description.
            outage: Whether all probes failed with transient errors.

        """
        super().__init__(msg)
        self.outage = outage
        self.retryable = outage


class InvalidOrder(PolymarketError):
    """Trade parameters cannot form a valid order."""


class TradeRejected(PolymarketError):
    """The exchange declined the order.

    Args:
        status_code: HTTP status code returned by the exchange.
        body: Raw response text, which usually holds the reject reason.

    """

    def __init__(self, status_code: int, body: str) -> None:
        """Initialize trade rejection.

        Args:
            status_code: HTTP status code returned by the exchange.
            body: Raw response text, which usually holds the reject reason.

        """
        super().__init__(f"Trade failed: {status_code} - {body}")
        self.status_code = status_code
        self.body = body


class TradeFailed(PolymarketError):
    """The order could not be submitted or its response could not be read."""

    retryable = True
