"""Tests for the local typed-data wallet signer."""

import pytest
from eth_account import Account  # type: ignore[import-untyped]
from eth_account.messages import encode_typed_data  # type: ignore[import-untyped]

from wallet_trading.clients.polymarket.auth.typed_data import (
    CLOB_AUTH_PRIMARY_TYPE,
    CLOB_AUTH_TYPES,
    clob_auth_domain,
    clob_auth_message,
)
from wallet_trading.clients.polymarket.auth.wallet_signer import (
    LocalAccountSigner,
    TypedDataSigner,
)
from wallet_trading.clients.polymarket.exceptions import UserRejectedSignature

_EXPECTED_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
_SIGNATURE_HEX_LENGTH = 132


class TestLocalAccountSigner:
    """Test suite for LocalAccountSigner."""

    def test_address_is_checksummed(self, signer: LocalAccountSigner) -> None:
        """Derive the checksummed address from the key."""
        assert signer.address == _EXPECTED_ADDRESS

    def test_satisfies_protocol(self, signer: LocalAccountSigner) -> None:
        """Fit wherever a typed-data signer is expected."""
        assert isinstance(signer, TypedDataSigner)

    @pytest.mark.asyncio
    async def test_signature_recovers_to_wallet(self, signer: LocalAccountSigner) -> None:
        """Produce a 65-byte signature that recovers to the wallet address."""
        domain = clob_auth_domain()
        message = clob_auth_message(signer.address, 1_700_000_000)

        signature = await signer.sign_typed_data(
            domain, CLOB_AUTH_TYPES, CLOB_AUTH_PRIMARY_TYPE, message
        )

        assert signature.startswith("0x")
        assert len(signature) == _SIGNATURE_HEX_LENGTH
        signable = encode_typed_data(
            domain_data=domain, message_types=CLOB_AUTH_TYPES, message_data=message
        )
        assert Account.recover_message(signable, signature=signature) == signer.address

    @pytest.mark.asyncio
    async def test_signature_is_deterministic(self, signer: LocalAccountSigner) -> None:
        """Sign identical typed data to the identical signature."""
        domain = clob_auth_domain()
        message = clob_auth_message(signer.address, 1_700_000_000)

        first = await signer.sign_typed_data(domain, CLOB_AUTH_TYPES, "ClobAuth", message)
        second = await signer.sign_typed_data(domain, CLOB_AUTH_TYPES, "ClobAuth", message)

        assert first == second

    @pytest.mark.asyncio
    async def test_unknown_primary_type_is_rejected(self, signer: LocalAccountSigner) -> None:
        """Refuse to sign a struct that the schema does not define."""
        with pytest.raises(UserRejectedSignature):
            await signer.sign_typed_data(clob_auth_domain(), CLOB_AUTH_TYPES, "Order", {})
