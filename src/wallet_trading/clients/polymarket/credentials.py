"""Credential bootstrap: turn a wallet signature into exchange API credentials.

The pipeline is a linear state machine with one branch::

    START -> WALLET_VALIDATED -> TIME_SYNCED -> MESSAGE_SIGNED
          -> CREDENTIALS_OBTAINED -> PERSISTED

Any state may end in ``FAILED`` with a tagged error.  Step four creates
credentials and switches to re-deriving them when the exchange reports a
conflict, which makes the whole pipeline idempotent per wallet and nonce.
Nothing is persisted unless every earlier step succeeded.
"""

import logging
from enum import Enum
from typing import Protocol, runtime_checkable

from web3 import Web3

from wallet_trading.clients.polymarket._constants import POLYGON_CHAIN_ID
from wallet_trading.clients.polymarket.auth.typed_data import (
    CLOB_AUTH_PRIMARY_TYPE,
    CLOB_AUTH_TYPES,
    clob_auth_domain,
    clob_auth_message,
)
from wallet_trading.clients.polymarket.auth.wallet_signer import TypedDataSigner
from wallet_trading.clients.polymarket.exceptions import (
    CredentialConflict,
    CredentialIssuanceFailed,
    InvalidAddress,
    PolymarketError,
    UserRejectedSignature,
    WalletNotRegistered,
)
from wallet_trading.clients.polymarket.models import (
    ApiCredentials,
    BootstrapOutcome,
    CredentialRecord,
)
from wallet_trading.clients.polymarket.relay import CredentialRelay
from wallet_trading.core.results import Failure, Result, Success
from wallet_trading.core.tracing import log_step

logger = logging.getLogger(__name__)

_OPERATION = "bootstrap"
DEFAULT_NONCE = 0


class BootstrapState(Enum):
    """States of the credential bootstrap pipeline."""

    START = "start"
    WALLET_VALIDATED = "wallet_validated"
    TIME_SYNCED = "time_synced"
    MESSAGE_SIGNED = "message_signed"
    CREDENTIALS_OBTAINED = "credentials_obtained"
    PERSISTED = "persisted"
    FAILED = "failed"


@runtime_checkable
class CredentialStore(Protocol):
    """Session storage for issued credentials."""

    async def save(self, record: CredentialRecord) -> None:
        """Persist a credential record, replacing any previous one for the wallet."""
        ...

    async def load(self, wallet_address: str) -> CredentialRecord | None:
        """Return the stored record for a wallet, if any."""
        ...


class InMemoryCredentialStore:
    """Credential store that keeps records for the lifetime of the process."""

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._records: dict[str, CredentialRecord] = {}

    async def save(self, record: CredentialRecord) -> None:
        """Store a record keyed by lowercase wallet address."""
        self._records[record.wallet_address.lower()] = record

    async def load(self, wallet_address: str) -> CredentialRecord | None:
        """Return the record for a wallet, if any."""
        return self._records.get(wallet_address.lower())


class CredentialBootstrapper:
    """Obtain and persist API credentials for a wallet.

    Args:
        relay: Trusted relay for registration, time and issuance calls.
        signer: Wallet signing capability; prompts the user.
        store: Session storage that receives the credentials.
        chain_id: Chain used in the authentication signing domain.
        verify: Test new credentials with a Level 2 request before persisting.

    """

    def __init__(
        self,
        relay: CredentialRelay,
        signer: TypedDataSigner,
        store: CredentialStore,
        *,
        chain_id: int = POLYGON_CHAIN_ID,
        verify: bool = True,
    ) -> None:
        """Initialize the bootstrapper.

        Args:
            relay: Trusted relay for registration, time and issuance calls.
            signer: Wallet signing capability; prompts the user.
            store: Session storage that receives the credentials.
            chain_id: Chain used in the authentication signing domain.
            verify: Test new credentials with a Level 2 request before persisting.

        """
        self._relay = relay
        self._signer = signer
        self._store = store
        self._chain_id = chain_id
        self._verify = verify

    async def bootstrap(
        self,
        wallet_address: str,
        funder_address: str | None = None,
        *,
        nonce: int = DEFAULT_NONCE,
    ) -> Result[BootstrapOutcome]:
        """Run the full bootstrap pipeline for a wallet.

        Args:
            wallet_address: EOA that signs the authentication message.
            funder_address: Address holding the funds; defaults to the wallet.
            nonce: Credential nonce; the exchange currently only uses 0.

        Returns:
            ``Success`` with the persisted record, or ``Failure`` tagged with
            the step's error.  A malformed address fails with
            ``InvalidAddress`` before any request is made.

        """
        for address in (wallet_address, funder_address or wallet_address):
            if not Web3.is_address(address):
                log_step(logger, _OPERATION, BootstrapState.FAILED.value, None, after="start")
                msg = f"Invalid address: {address!r}"
                return Failure(InvalidAddress(msg))
        wallet = Web3.to_checksum_address(wallet_address)
        funder = Web3.to_checksum_address(funder_address or wallet)
        state = BootstrapState.START
        try:
            await self._validate_wallet(wallet)
            state = self._advance(BootstrapState.WALLET_VALIDATED, wallet)

            timestamp = await self._relay.server_time()
            state = self._advance(BootstrapState.TIME_SYNCED, wallet, timestamp=timestamp)

            signature = await self._signer.sign_typed_data(
                clob_auth_domain(self._chain_id),
                CLOB_AUTH_TYPES,
                CLOB_AUTH_PRIMARY_TYPE,
                clob_auth_message(wallet, timestamp, nonce),
            )
            state = self._advance(BootstrapState.MESSAGE_SIGNED, wallet)

            credentials, derived = await self._obtain(wallet, signature, timestamp, nonce)
            state = self._advance(BootstrapState.CREDENTIALS_OBTAINED, wallet, derived=derived)

            if self._verify and not await self._relay.verify_credentials(wallet, credentials):
                msg = "Issued credentials failed verification; not saved"
                raise CredentialIssuanceFailed(msg)

            record = CredentialRecord(
                wallet_address=wallet,
                funder_address=funder,
                credentials=credentials,
            )
            await self._store.save(record)
            self._advance(BootstrapState.PERSISTED, wallet)
        except UserRejectedSignature as exc:
            log_step(logger, _OPERATION, BootstrapState.FAILED.value, wallet, after=state.value)
            return Failure(exc)
        except PolymarketError as exc:
            log_step(
                logger,
                _OPERATION,
                BootstrapState.FAILED.value,
                wallet,
                level=logging.WARNING,
                after=state.value,
                error=type(exc).__name__,
            )
            return Failure(exc)
        return Success(BootstrapOutcome(record=record, derived=derived))

    async def _validate_wallet(self, wallet: str) -> None:
        """Fail with ``WalletNotRegistered`` when the exchange does not know the wallet."""
        validation = await self._relay.validate_wallet(wallet)
        if not validation.registered:
            raise WalletNotRegistered

    async def _obtain(
        self, wallet: str, signature: str, timestamp: int, nonce: int
    ) -> tuple[ApiCredentials, bool]:
        """Create credentials, or derive the existing ones on conflict.

        Returns:
            The credentials and whether they were derived.

        """
        try:
            return await self._relay.create_api_key(wallet, signature, timestamp, nonce), False
        except CredentialConflict:
            log_step(logger, _OPERATION, "derive", wallet)
        try:
            return await self._relay.derive_api_key(wallet, signature, timestamp, nonce), True
        except CredentialIssuanceFailed:
            if await self._relay.access_status(wallet):
                raise WalletNotRegistered from None
            raise

    @staticmethod
    def _advance(state: BootstrapState, wallet: str, **fields: object) -> BootstrapState:
        """Log a state transition and return the new state."""
        log_step(logger, _OPERATION, state.value, wallet, **fields)
        return state

