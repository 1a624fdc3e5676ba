"""Wallet signing capability for EIP-712 typed data.

The credential and order pipelines never hold a private key; they ask a
``TypedDataSigner`` for a signature and suspend until the wallet answers.
A browser or hardware wallet bridge implements the protocol by prompting
the user, and raises ``UserRejectedSignature`` when the user declines.
``LocalAccountSigner`` signs in-process with ``eth_account`` for the CLI
and tests.
"""

from typing import Any, Protocol, runtime_checkable

from eth_account import Account  # type: ignore[import-untyped]
from web3 import Web3

from wallet_trading.clients.polymarket.exceptions import UserRejectedSignature


@runtime_checkable
class TypedDataSigner(Protocol):
    """Async provider of EIP-712 signatures for one wallet."""

    @property
    def address(self) -> str:
        """Return the checksummed address of the signing wallet."""
        ...

    async def sign_typed_data(
        self,
        domain: dict[str, Any],
        types: dict[str, list[dict[str, str]]],
        primary_type: str,
        message: dict[str, Any],
    ) -> str:
        """Return a 0x-prefixed hex signature, or raise ``UserRejectedSignature``."""
        ...


class LocalAccountSigner:
    """Sign typed data with a locally held private key.

    Args:
        private_key: Hex-encoded private key (with ``0x`` prefix).

    """

    def __init__(self, private_key: str) -> None:
        """Initialize the signer from a private key.

        Args:
            private_key: Hex-encoded private key (with ``0x`` prefix).

        """
        self._account = Account.from_key(private_key)

    @property
    def address(self) -> str:
        """Return the checksummed address derived from the key."""
        return Web3.to_checksum_address(self._account.address)

    async def sign_typed_data(
        self,
        domain: dict[str, Any],
        types: dict[str, list[dict[str, str]]],
        primary_type: str,
        message: dict[str, Any],
    ) -> str:
        """Sign an EIP-712 message.

        Args:
            domain: EIP-712 domain fields.
            types: Struct type definitions, excluding ``EIP712Domain``.
            primary_type: Name of the struct being signed.
            message: Struct values.

        Returns:
            0x-prefixed hex signature.

        Raises:
            UserRejectedSignature: When ``primary_type`` is not defined in ``types``.

        """
        if primary_type not in types:
            msg = f"Refusing to sign unknown type {primary_type!r}"
            raise UserRejectedSignature(msg)
        signed = self._account.sign_typed_data(
            domain_data=domain,
            message_types=types,
            message_data=message,
        )
        return "0x" + bytes(signed.signature).hex()
