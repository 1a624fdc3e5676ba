"""Resolve the on-chain address that holds a wallet's tradable balance.

The exchange has no "funder for EOA" endpoint, so resolution is a
first-match-wins chain over read APIs: the first Safe owned by the EOA,
then the EOA itself, each accepted when it shows a positive portfolio
value or at least one open position.  A failing probe counts as "no
signal" and never aborts the chain.
"""

import logging

from web3 import Web3

from wallet_trading.clients.polymarket._data_client import DataApiClient, ProbeOutcome
from wallet_trading.clients.polymarket.exceptions import FunderUnresolved
from wallet_trading.clients.polymarket.models import FunderResolution
from wallet_trading.core.results import Failure, Result, Success
from wallet_trading.core.tracing import log_step

logger = logging.getLogger(__name__)

_OPERATION = "resolve_funder"


def _combine(*outcomes: ProbeOutcome) -> ProbeOutcome:
    """Merge independent probe outcomes: any hit wins, then any transient error."""
    if ProbeOutcome.FOUND in outcomes:
        return ProbeOutcome.FOUND
    if ProbeOutcome.TRANSIENT_ERROR in outcomes:
        return ProbeOutcome.TRANSIENT_ERROR
    return ProbeOutcome.NOT_FOUND


class FunderResolver:
    """Discover the funder address for an externally-owned account.

    Args:
        data_client: Client for the registry and portfolio read endpoints.

    """

    def __init__(self, data_client: DataApiClient) -> None:
        """Initialize the resolver.

        Args:
            data_client: Client for the registry and portfolio read endpoints.

        """
        self._data = data_client

    async def has_value_or_positions(self, address: str) -> ProbeOutcome:
        """Probe both funding signals for an address.

        Args:
            address: Address to probe.

        Returns:
            ``FOUND`` if either signal is positive.

        """
        value = await self._data.probe_value(address)
        if value is ProbeOutcome.FOUND:
            return value
        positions = await self._data.probe_positions(address)
        return _combine(value, positions)

    async def resolve(self, eoa: str) -> Result[FunderResolution]:
        """Resolve the funder for an EOA.

        Args:
            eoa: Externally-owned account address.

        Returns:
            ``Success`` with the funder and its source, or ``Failure`` with
            ``FunderUnresolved`` when no candidate qualifies.

        """
        if not Web3.is_address(eoa):
            return Failure(FunderUnresolved(f"Invalid wallet address: {eoa}"))
        eoa = Web3.to_checksum_address(eoa)
        seen: list[ProbeOutcome] = []

        lookup = await self._data.get_safes(eoa)
        seen.append(lookup.outcome)
        if lookup.safes:
            candidate = lookup.safes[0]
            outcome = await self.has_value_or_positions(candidate)
            seen.append(outcome)
            log_step(logger, _OPERATION, "safe_probed", eoa, outcome=outcome.value)
            if outcome is ProbeOutcome.FOUND and Web3.is_address(candidate):
                return Success(
                    FunderResolution(address=Web3.to_checksum_address(candidate), source="safe")
                )

        outcome = await self.has_value_or_positions(eoa)
        seen.append(outcome)
        log_step(logger, _OPERATION, "eoa_probed", eoa, outcome=outcome.value)
        if outcome is ProbeOutcome.FOUND:
            return Success(FunderResolution(address=eoa, source="eoa"))

        outage = all(o is ProbeOutcome.TRANSIENT_ERROR for o in seen)
        log_step(logger, _OPERATION, "unresolved", eoa, outage=outage)
        return Failure(FunderUnresolved(outage=outage))

    async def verify_candidate(self, address: str) -> Result[FunderResolution]:
        """Verify a manually entered funder address.

        Args:
            address: User-supplied proxy wallet address.

        Returns:
            ``Success`` with a ``manual`` resolution when the address shows
            funds or positions, otherwise ``Failure`` with ``FunderUnresolved``.

        """
        if not Web3.is_address(address):
            return Failure(FunderUnresolved(f"Invalid funder address: {address}"))
        address = Web3.to_checksum_address(address)
        outcome = await self.has_value_or_positions(address)
        log_step(logger, _OPERATION, "manual_probed", address, outcome=outcome.value)
        if outcome is ProbeOutcome.FOUND:
            return Success(FunderResolution(address=address, source="manual"))
        return Failure(
            FunderUnresolved(
                f"No Polymarket funds or positions found for {address}",
                outage=outcome is ProbeOutcome.TRANSIENT_ERROR,
            )
        )
