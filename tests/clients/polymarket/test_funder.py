"""Tests for funder address resolution."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from wallet_trading.clients.polymarket._data_client import (
    DataApiClient,
    ProbeOutcome,
    SafeLookup,
)
from wallet_trading.clients.polymarket.exceptions import FunderUnresolved
from wallet_trading.clients.polymarket.funder import FunderResolver
from wallet_trading.clients.polymarket.models import FunderResolution
from wallet_trading.core.results import Failure, Success

_EOA = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
_SAFE = "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC"

_FOUND = ProbeOutcome.FOUND
_NONE = ProbeOutcome.NOT_FOUND
_DOWN = ProbeOutcome.TRANSIENT_ERROR


def _data_client(
    *,
    safes: SafeLookup | None = None,
    value: dict[str, ProbeOutcome] | None = None,
    positions: dict[str, ProbeOutcome] | None = None,
) -> MagicMock:
    """Build a mocked DataApiClient with per-address probe outcomes.

    Args:
        safes: Registry lookup result; no safes when omitted.
        value: Value probe outcome per address; ``NOT_FOUND`` when absent.
        positions: Positions probe outcome per address; ``NOT_FOUND`` when absent.

    Returns:
        MagicMock standing in for ``DataApiClient``.

    """
    value = value or {}
    positions = positions or {}
    mock = MagicMock(spec=DataApiClient)
    mock.get_safes = AsyncMock(return_value=safes or SafeLookup(outcome=_NONE))
    mock.probe_value = AsyncMock(side_effect=lambda user: value.get(user, _NONE))
    mock.probe_positions = AsyncMock(side_effect=lambda user: positions.get(user, _NONE))
    return mock


class TestFunderResolver:
    """Test suite for FunderResolver."""

    @pytest.mark.asyncio
    async def test_unfunded_eoa_is_unresolved(self) -> None:
        """Fail with an expected, non-retryable unresolved state."""
        resolver = FunderResolver(_data_client())

        result = await resolver.resolve(_EOA)

        assert isinstance(result, Failure)
        assert isinstance(result.error, FunderUnresolved)
        assert result.error.outage is False
        assert not result.retryable
        assert result.error.remediation

    @pytest.mark.asyncio
    async def test_funded_safe_wins(self) -> None:
        """Return the first safe with value without probing the EOA."""
        data = _data_client(
            safes=SafeLookup(outcome=_FOUND, safes=(_SAFE,)),
            value={_SAFE: _FOUND, _EOA: _FOUND},
        )
        resolver = FunderResolver(data)

        result = await resolver.resolve(_EOA)

        assert result == Success(FunderResolution(address=_SAFE, source="safe"))
        data.probe_value.assert_awaited_once_with(_SAFE)
        data.probe_positions.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_safe_with_positions_only(self) -> None:
        """Accept a safe that holds positions but no reported value."""
        data = _data_client(
            safes=SafeLookup(outcome=_FOUND, safes=(_SAFE,)),
            positions={_SAFE: _FOUND},
        )

        result = await FunderResolver(data).resolve(_EOA)

        assert isinstance(result, Success)
        assert result.value.address == _SAFE

    @pytest.mark.asyncio
    async def test_empty_safe_falls_back_to_funded_eoa(self) -> None:
        """Use the EOA itself when its own portfolio has value."""
        data = _data_client(
            safes=SafeLookup(outcome=_FOUND, safes=(_SAFE,)),
            value={_EOA: _FOUND},
        )

        result = await FunderResolver(data).resolve(_EOA)

        assert result == Success(FunderResolution(address=_EOA, source="eoa"))

    @pytest.mark.asyncio
    async def test_lowercase_eoa_is_checksummed(self) -> None:
        """Probe and return the checksummed EOA."""
        data = _data_client(value={_EOA: _FOUND})

        result = await FunderResolver(data).resolve(_EOA.lower())

        assert isinstance(result, Success)
        assert result.value.address == _EOA
        data.get_safes.assert_awaited_once_with(_EOA)

    @pytest.mark.asyncio
    async def test_all_probes_down_is_outage(self) -> None:
        """Flag an outage when every call failed transiently."""
        data = _data_client(
            safes=SafeLookup(outcome=_DOWN),
            value={_EOA: _DOWN},
            positions={_EOA: _DOWN},
        )

        result = await FunderResolver(data).resolve(_EOA)

        assert isinstance(result, Failure)
        assert isinstance(result.error, FunderUnresolved)
        assert result.error.outage is True
        assert result.retryable

    @pytest.mark.asyncio
    async def test_partial_outage_is_not_outage(self) -> None:
        """Treat a mix of failures and empty answers as a plain miss."""
        data = _data_client(safes=SafeLookup(outcome=_DOWN))

        result = await FunderResolver(data).resolve(_EOA)

        assert isinstance(result, Failure)
        assert not result.retryable

    @pytest.mark.asyncio
    async def test_invalid_eoa(self) -> None:
        """Fail without any network call for a malformed address."""
        data = _data_client()

        result = await FunderResolver(data).resolve("0x1234")

        assert isinstance(result, Failure)
        data.get_safes.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_value_hit_skips_positions(self) -> None:
        """Short-circuit the second probe when the first finds value."""
        data = _data_client(value={_EOA: _FOUND})

        outcome = await FunderResolver(data).has_value_or_positions(_EOA)

        assert outcome is _FOUND
        data.probe_positions.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_verify_candidate_found(self) -> None:
        """Accept a manual address that holds positions."""
        data = _data_client(positions={_SAFE: _FOUND})

        result = await FunderResolver(data).verify_candidate(_SAFE.lower())

        assert result == Success(FunderResolution(address=_SAFE, source="manual"))

    @pytest.mark.asyncio
    async def test_verify_candidate_empty(self) -> None:
        """Reject a manual address with no funds or positions."""
        result = await FunderResolver(_data_client()).verify_candidate(_SAFE)

        assert isinstance(result, Failure)
        assert _SAFE in result.message

    @pytest.mark.asyncio
    async def test_verify_candidate_invalid(self) -> None:
        """Reject a malformed manual address."""
        result = await FunderResolver(_data_client()).verify_candidate("not-an-address")

        assert isinstance(result, Failure)
        assert isinstance(result.error, FunderUnresolved)


class TestFunderResolverOverHttp:
    """Run the resolver against the real client with mocked HTTP responses."""

    @pytest.mark.asyncio
    async def test_new_wallet_without_safe_or_funds(self) -> None:
        """Resolve nothing for a fresh EOA: no safe, zero value, no positions."""
        bodies: dict[str, Any] = {
            "safes": {"safes": []},
            "value": [{"user": _EOA, "value": 0}],
            "positions": [],
        }

        async def fake_request(method: str, url: str, **kwargs: Any) -> MagicMock:
            response = MagicMock()
            response.status_code = 200
            key = url.rstrip("/").rsplit("/", 1)[-1]
            response.json.return_value = bodies[key]
            return response

        async with DataApiClient() as client:
            with patch.object(
                client._http_client, "request", new=AsyncMock(side_effect=fake_request)
            ):
                result = await FunderResolver(client).resolve(_EOA)

        assert isinstance(result, Failure)
        assert isinstance(result.error, FunderUnresolved)
        assert result.error.outage is False
