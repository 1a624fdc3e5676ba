"""Typed data models for the credential and order pipelines.

Provide frozen dataclasses for API credentials, trade parameters, the
canonical unsigned order and its signed submission form.  Prices and
sizes use ``Decimal`` for precision.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any

from wallet_trading.clients.polymarket._constants import SIDE_BUY, SIDE_SELL


class OrderSide(Enum):
    """Order direction and its on-chain encoding."""

    BUY = SIDE_BUY
    SELL = SIDE_SELL

    @property
    def code(self) -> int:
        """Return the ``uint8`` side value used in the signed order."""
        return 0 if self is OrderSide.BUY else 1


class SignatureType(Enum):
    """Signer kinds accepted by the exchange for order signatures."""

    EOA = 0
    POLY_PROXY = 1
    BROWSER_WALLET = 2


def _mask(value: str) -> str:
    """Return a redacted form of a secret value."""
    return "***" if value else ""


@dataclass(frozen=True)
class ApiCredentials:
    """Exchange-scoped API credentials for one wallet.

    Possession authorizes order placement, so ``repr`` never shows the
    values.

    Args:
        api_key: API key identifier.
        secret: HMAC secret.
        passphrase: API passphrase.

    """

    api_key: str = field(repr=False)
    secret: str = field(repr=False)
    passphrase: str = field(repr=False)

    def __repr__(self) -> str:
        """Return a representation with every field masked."""
        return (
            f"ApiCredentials(api_key={_mask(self.api_key)!r}, "
            f"secret={_mask(self.secret)!r}, passphrase={_mask(self.passphrase)!r})"
        )

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> "ApiCredentials":
        """Build credentials from an exchange response body.

        The exchange returns the key as either ``apiKey`` or ``key``.

        Args:
            data: Parsed JSON response body.

        Returns:
            Parsed credentials.

        Raises:
            ValueError: When any of the three values is missing.

        """
        api_key = str(data.get("apiKey") or data.get("key") or "")
        secret = str(data.get("secret") or "")
        passphrase = str(data.get("passphrase") or "")
        if not (api_key and secret and passphrase):
            msg = "Incomplete credentials in response"
            raise ValueError(msg)
        return cls(api_key=api_key, secret=secret, passphrase=passphrase)


@dataclass(frozen=True)
class CredentialRecord:
    """Credentials plus the wallet context they were issued for.

    Args:
        wallet_address: EOA that signed the authentication message.
        funder_address: Address holding the tradable balance.
        credentials: Issued API credentials.

    """

    wallet_address: str
    funder_address: str
    credentials: ApiCredentials


@dataclass(frozen=True)
class BootstrapOutcome:
    """Successful result of the credential bootstrap pipeline.

    Args:
        record: The persisted credential record.
        derived: ``True`` when existing credentials were returned (re-derived
            or reused from storage) instead of newly created.

    """

    record: CredentialRecord
    derived: bool


@dataclass(frozen=True)
class FunderResolution:
    """A resolved funder address and how it was found.

    Args:
        address: Address whose balance the exchange debits and credits.
        source: ``"safe"`` for a registry proxy wallet, ``"eoa"`` when the
            wallet itself holds funds, ``"manual"`` for a user-supplied
            address that passed verification.

    """

    address: str
    source: str


@dataclass(frozen=True)
class TradeParams:
    """Caller input for a single trade.

    Args:
        token_id: CLOB token identifier (decimal string).
        price: Limit price in the exchange's fractional scale (0-1).
        size: Number of outcome shares.
        side: Order direction.
        wallet_address: EOA that signs the order.
        funder_address: Address holding the funds, if different from the wallet.

    """

    token_id: str
    price: Decimal
    size: Decimal
    side: OrderSide
    wallet_address: str
    funder_address: str | None = None


@dataclass(frozen=True)
class Order:
    """Canonical unsigned order, field-for-field the signed EIP-712 struct.

    Args:
        salt: Random value making otherwise identical orders unique.
        maker: Address whose funds are used (funder or wallet).
        signer: EOA producing the signature.
        taker: Counterparty address; zero for public orders.
        token_id: CLOB token identifier.
        maker_amount: Amount the maker gives, in 6-decimal base units.
        taker_amount: Amount the maker receives, in 6-decimal base units.
        expiration: Unix timestamp after which the order is void.
        nonce: Exchange nonce for the order.
        fee_rate_bps: Fee rate in basis points.
        side: Order direction.
        signature_type: Signer kind tag.

    """

    salt: int
    maker: str
    signer: str
    taker: str
    token_id: int
    maker_amount: int
    taker_amount: int
    expiration: int
    nonce: int
    fee_rate_bps: int
    side: OrderSide
    signature_type: SignatureType

    def to_message(self) -> dict[str, Any]:
        """Return the order as an EIP-712 ``Order`` message."""
        return {
            "salt": self.salt,
            "maker": self.maker,
            "signer": self.signer,
            "taker": self.taker,
            "tokenId": self.token_id,
            "makerAmount": self.maker_amount,
            "takerAmount": self.taker_amount,
            "expiration": self.expiration,
            "nonce": self.nonce,
            "feeRateBps": self.fee_rate_bps,
            "side": self.side.code,
            "signatureType": self.signature_type.value,
        }


@dataclass(frozen=True)
class SignedOrder:
    """An order bound to exactly one wallet signature.

    Args:
        order: The unsigned order that was signed.
        signature: 0x-prefixed hex EIP-712 signature over ``order``.

    """

    order: Order
    signature: str

    @property
    def address(self) -> str:
        """Return the address the exchange authenticates the request for."""
        return self.order.maker

    def to_payload(self) -> dict[str, Any]:
        """Return the submission payload.

        Integer fields become decimal strings, matching the exchange's
        JSON representation of ``uint256`` values.
        """
        message = self.order.to_message()
        payload: dict[str, Any] = {
            key: str(value) if isinstance(value, int) and key not in _NUMERIC_KEYS else value
            for key, value in message.items()
        }
        payload["signature"] = self.signature
        return payload


_NUMERIC_KEYS = frozenset({"side", "signatureType"})
