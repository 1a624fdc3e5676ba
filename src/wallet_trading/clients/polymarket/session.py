"""Trading session facade for one connected wallet.

Compose the funder resolver, credential bootstrapper, order builder and
trade executor around a single wallet signer.  The funder address and
credentials are cached once resolved; a failed step leaves the cache as
it was.  Each trade runs its own build, sign and submit pipeline.
"""

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Any

import httpx
from web3 import Web3

from wallet_trading.clients.polymarket._data_client import DataApiClient
from wallet_trading.clients.polymarket.auth.wallet_signer import TypedDataSigner
from wallet_trading.clients.polymarket.credentials import (
    CredentialBootstrapper,
    CredentialStore,
    InMemoryCredentialStore,
)
from wallet_trading.clients.polymarket.executor import TradeExecutor
from wallet_trading.clients.polymarket.funder import FunderResolver
from wallet_trading.clients.polymarket.models import (
    ApiCredentials,
    BootstrapOutcome,
    CredentialRecord,
    FunderResolution,
    OrderSide,
    TradeParams,
)
from wallet_trading.clients.polymarket.orders import OrderBuilder
from wallet_trading.clients.polymarket.relay import ClobRelay, CredentialRelay
from wallet_trading.clients.polymarket.settings import PolymarketSettings
from wallet_trading.core.results import Failure, Result, Success
from wallet_trading.core.tracing import log_step

logger = logging.getLogger(__name__)


class TradingSession:
    """Wallet-scoped entry point for connecting and trading.

    Args:
        signer: Wallet signing capability.
        settings: Connection settings; loaded from configuration when omitted.
        relay: Credential relay; a ``ClobRelay`` when omitted.
        store: Credential store; an in-memory store when omitted.
        http_client: Shared HTTP client for all exchange calls.

    """

    def __init__(
        self,
        signer: TypedDataSigner,
        *,
        settings: PolymarketSettings | None = None,
        relay: CredentialRelay | None = None,
        store: CredentialStore | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            signer: Wallet signing capability.
            settings: Connection settings; loaded from configuration when omitted.
            relay: Credential relay; a ``ClobRelay`` when omitted.
            store: Credential store; an in-memory store when omitted.
            http_client: Shared HTTP client for all exchange calls.

        """
        self.settings = settings or PolymarketSettings.from_config()
        self._signer = signer
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(
            timeout=self.settings.request_timeout
        )
        self._store = store or InMemoryCredentialStore()
        self._relay = relay or ClobRelay(
            self._http_client,
            host=self.settings.clob_host,
            decode_secret=self.settings.decode_secret,
        )
        self._resolver = FunderResolver(
            DataApiClient(
                self._http_client,
                data_api_url=self.settings.data_api_url,
                safe_client_url=self.settings.safe_client_url,
                chain_id=self.settings.chain_id,
            )
        )
        self._bootstrapper = CredentialBootstrapper(
            self._relay,
            signer,
            self._store,
            chain_id=self.settings.chain_id,
            verify=self.settings.verify_credentials,
        )
        self._builder = OrderBuilder(
            signer,
            chain_id=self.settings.chain_id,
            exchange_address=self.settings.exchange_address,
            order_ttl=self.settings.order_ttl_seconds,
        )
        self._executor = TradeExecutor(
            self._http_client,
            host=self.settings.clob_host,
            decode_secret=self.settings.decode_secret,
        )
        self._funder: FunderResolution | None = None
        self._record: CredentialRecord | None = None

    @property
    def wallet_address(self) -> str:
        """Return the connected wallet address."""
        return self._signer.address

    @property
    def funder_address(self) -> str | None:
        """Return the cached funder address, if resolved."""
        return self._funder.address if self._funder else None

    @property
    def credentials(self) -> ApiCredentials | None:
        """Return the cached credentials, if connected."""
        return self._record.credentials if self._record else None

    async def resolve_funder(self) -> Result[FunderResolution]:
        """Resolve and cache the funder address for the wallet.

        Returns:
            The cached resolution when present, otherwise a fresh result.

        """
        if self._funder is not None:
            return Success(self._funder)
        result = await self._resolver.resolve(self.wallet_address)
        if isinstance(result, Success):
            self._adopt_funder(result.value)
        return result

    async def use_manual_funder(self, address: str) -> Result[FunderResolution]:
        """Verify a user-entered funder address and cache it on success.

        Args:
            address: Proxy wallet address supplied by the user.

        Returns:
            Verification result.

        """
        result = await self._resolver.verify_candidate(address)
        if isinstance(result, Success):
            self._adopt_funder(result.value)
            if self._record is not None:
                await self._store.save(self._record)
        return result

    def use_funder(self, address: str) -> None:
        """Adopt a funder address the user configured, without probing it.

        Args:
            address: Proxy wallet address.

        Raises:
            ValueError: When the address is malformed.

        """
        if not Web3.is_address(address):
            msg = f"Invalid funder address: {address!r}"
            raise ValueError(msg)
        self._adopt_funder(
            FunderResolution(address=Web3.to_checksum_address(address), source="manual")
        )

    def _adopt_funder(self, resolution: FunderResolution) -> None:
        """Cache a funder and point any cached credential record at it."""
        self._funder = resolution
        if self._record is not None and self._record.funder_address != resolution.address:
            self._record = replace(self._record, funder_address=resolution.address)
            log_step(logger, "connect", "funder_changed", self.wallet_address)

    def use_credentials(
        self,
        credentials: ApiCredentials,
        funder_address: str | None = None,
    ) -> None:
        """Adopt credentials obtained earlier, skipping the bootstrap prompt.

        Args:
            credentials: Previously issued API credentials.
            funder_address: Funder the credentials were used with, if known.

        Raises:
            ValueError: When ``funder_address`` is malformed.

        """
        if funder_address:
            self.use_funder(funder_address)
        self._record = CredentialRecord(
            wallet_address=self.wallet_address,
            funder_address=self.funder_address or self.wallet_address,
            credentials=credentials,
        )

    async def connect(self) -> Result[BootstrapOutcome]:
        """Return credentials for the wallet, bootstrapping them if needed.

        Stored credentials are reused.  Otherwise the funder is resolved
        (falling back to the wallet itself when unresolved) and the
        bootstrap pipeline runs.

        Returns:
            Bootstrap outcome, or the failure from the pipeline.

        """
        if self._record is not None:
            return Success(BootstrapOutcome(record=self._record, derived=True))
        stored = await self._store.load(self.wallet_address)
        if stored is not None:
            log_step(logger, "connect", "reused", self.wallet_address)
            self._record = stored
            return Success(BootstrapOutcome(record=stored, derived=True))

        funder = await self.resolve_funder()
        funder_address = funder.value.address if isinstance(funder, Success) else None
        result = await self._bootstrapper.bootstrap(self.wallet_address, funder_address)
        if isinstance(result, Success):
            self._record = result.value.record
        return result

    async def place_trade(
        self,
        token_id: str,
        price: Decimal,
        size: Decimal,
        side: OrderSide,
    ) -> Result[dict[str, Any]]:
        """Build, sign and submit one order.

        Args:
            token_id: CLOB token identifier.
            price: Limit price in the exchange's fractional scale.
            size: Number of shares.
            side: Order direction.

        Returns:
            Exchange response on success, or the failure from whichever
            step failed.

        """
        connected = await self.connect()
        if isinstance(connected, Failure):
            return connected
        record = connected.value.record
        params = TradeParams(
            token_id=token_id,
            price=price,
            size=size,
            side=side,
            wallet_address=self.wallet_address,
            funder_address=self.funder_address or record.funder_address,
        )
        signed = await self._builder.build_and_sign(params)
        if isinstance(signed, Failure):
            return signed
        return await self._executor.execute(signed.value, record.credentials)

    async def close(self) -> None:
        """Close the shared HTTP client if this session created it."""
        if self._owns_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "TradingSession":
        """Enter async context manager."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager."""
        await self.close()
