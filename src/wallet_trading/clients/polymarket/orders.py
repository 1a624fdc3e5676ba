"""Build canonical exchange orders and bind a wallet signature to them.

Order signing is a per-trade wallet prompt, independent of the one-time
credential bootstrap.  A rejected prompt is returned as a failure and is
never retried automatically.
"""

import logging
import secrets
import time
from collections.abc import Callable
from decimal import ROUND_DOWN, Decimal

from web3 import Web3

from wallet_trading.clients.polymarket._constants import (
    CTF_EXCHANGE_ADDRESS,
    POLYGON_CHAIN_ID,
    TOKEN_DECIMALS,
    ZERO_ADDRESS,
)
from wallet_trading.clients.polymarket.auth.typed_data import (
    ORDER_PRIMARY_TYPE,
    ORDER_TYPES,
    order_domain,
)
from wallet_trading.clients.polymarket.auth.wallet_signer import TypedDataSigner
from wallet_trading.clients.polymarket.exceptions import (
    InvalidOrder,
    PolymarketError,
    UserRejectedSignature,
)
from wallet_trading.clients.polymarket.models import (
    Order,
    OrderSide,
    SignatureType,
    SignedOrder,
    TradeParams,
)
from wallet_trading.core.results import Failure, Result, Success
from wallet_trading.core.tracing import log_step

logger = logging.getLogger(__name__)

_OPERATION = "sign_order"
_BASE_UNIT = Decimal(10) ** TOKEN_DECIMALS
_SALT_BITS = 53
DEFAULT_ORDER_TTL = 86_400


def to_base_units(amount: Decimal) -> int:
    """Convert a token amount to 6-decimal integer base units, rounding down."""
    return int((amount * _BASE_UNIT).to_integral_value(rounding=ROUND_DOWN))


def _random_salt() -> int:
    """Return a random salt that fits in a JavaScript safe integer."""
    return secrets.randbits(_SALT_BITS)


class OrderBuilder:
    """Construct and sign orders for browser-wallet trading.

    Args:
        signer: Wallet signing capability for the trading EOA.
        chain_id: Chain of the exchange contract.
        exchange_address: Exchange contract used as the signing domain.
        order_ttl: Seconds until a new order expires.
        clock: Source of the current Unix time in seconds.
        salt_factory: Source of random order salts.

    """

    def __init__(  # noqa: PLR0913
        self,
        signer: TypedDataSigner,
        *,
        chain_id: int = POLYGON_CHAIN_ID,
        exchange_address: str = CTF_EXCHANGE_ADDRESS,
        order_ttl: int = DEFAULT_ORDER_TTL,
        clock: Callable[[], float] = time.time,
        salt_factory: Callable[[], int] = _random_salt,
    ) -> None:
        """Initialize the builder.

        Args:
            signer: Wallet signing capability for the trading EOA.
            chain_id: Chain of the exchange contract.
            exchange_address: Exchange contract used as the signing domain.
            order_ttl: Seconds until a new order expires.
            clock: Source of the current Unix time in seconds.
            salt_factory: Source of random order salts.

        """
        self._signer = signer
        self._domain = order_domain(chain_id, exchange_address)
        self._order_ttl = order_ttl
        self._clock = clock
        self._salt_factory = salt_factory

    def build(self, params: TradeParams) -> Order:
        """Construct the canonical unsigned order.

        The maker is the funder when given, otherwise the wallet; the signer
        is always the wallet.  A BUY gives ``price * size`` collateral for
        ``size`` tokens, a SELL the reverse.  Price is taken as given, already
        in the exchange's fractional scale.

        Args:
            params: Trade parameters.

        Returns:
            Unsigned order.

        Raises:
            InvalidOrder: When the parameters cannot form an order.

        """
        _validate(params)
        wallet = Web3.to_checksum_address(params.wallet_address)
        maker = Web3.to_checksum_address(params.funder_address or params.wallet_address)
        collateral = to_base_units(params.price * params.size)
        tokens = to_base_units(params.size)
        is_buy = params.side is OrderSide.BUY
        now = self._clock()
        return Order(
            salt=self._salt_factory(),
            maker=maker,
            signer=wallet,
            taker=ZERO_ADDRESS,
            token_id=int(params.token_id),
            maker_amount=collateral if is_buy else tokens,
            taker_amount=tokens if is_buy else collateral,
            expiration=int(now) + self._order_ttl,
            nonce=int(now * 1000),
            fee_rate_bps=0,
            side=params.side,
            signature_type=SignatureType.BROWSER_WALLET,
        )

    async def sign(self, order: Order) -> Result[SignedOrder]:
        """Request the wallet's EIP-712 signature over an order.

        Args:
            order: Unsigned order.

        Returns:
            ``Success`` with the signed order, or ``Failure`` with
            ``UserRejectedSignature`` when the wallet declines.

        """
        try:
            signature = await self._signer.sign_typed_data(
                self._domain,
                ORDER_TYPES,
                ORDER_PRIMARY_TYPE,
                order.to_message(),
            )
        except UserRejectedSignature as exc:
            log_step(logger, _OPERATION, "rejected", order.signer)
            return Failure(exc)
        log_step(logger, _OPERATION, "signed", order.signer, side=order.side.value)
        return Success(SignedOrder(order=order, signature=signature))

    async def build_and_sign(self, params: TradeParams) -> Result[SignedOrder]:
        """Build an order from trade parameters and sign it.

        Args:
            params: Trade parameters.

        Returns:
            ``Success`` with the signed order, or a tagged ``Failure``.

        """
        try:
            order = self.build(params)
        except PolymarketError as exc:
            log_step(logger, _OPERATION, "invalid", params.wallet_address, reason=str(exc))
            return Failure(exc)
        log_step(logger, _OPERATION, "built", order.signer, token=params.token_id)
        return await self.sign(order)


def _validate(params: TradeParams) -> None:
    """Raise ``InvalidOrder`` for parameters the exchange cannot accept."""
    if not params.token_id.isdigit():
        msg = f"Token ID must be a decimal integer, got {params.token_id!r}"
        raise InvalidOrder(msg)
    if not params.price.is_finite() or params.price <= 0:
        msg = f"Price must be positive, got {params.price}"
        raise InvalidOrder(msg)
    if not params.size.is_finite() or params.size <= 0:
        msg = f"Size must be positive, got {params.size}"
        raise InvalidOrder(msg)
    if not Web3.is_address(params.wallet_address):
        msg = f"Invalid wallet address: {params.wallet_address!r}"
        raise InvalidOrder(msg)
    if params.funder_address is not None and not Web3.is_address(params.funder_address):
        msg = f"Invalid funder address: {params.funder_address!r}"
        raise InvalidOrder(msg)
