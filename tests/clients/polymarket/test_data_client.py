"""Tests for the Data API and proxy-wallet registry client."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from wallet_trading.clients.polymarket._data_client import (
    DataApiClient,
    ProbeOutcome,
    SafeLookup,
)

_STATUS_OK = 200
_STATUS_NOT_FOUND = 404
_STATUS_SERVER_ERROR = 503
_OWNER = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
_SAFE = "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC"


def _response(status_code: int = _STATUS_OK, json_data: Any = None) -> MagicMock:
    """Build a mock HTTP response.

    Args:
        status_code: HTTP status to report.
        json_data: Parsed body to return from ``json()``.

    Returns:
        MagicMock standing in for ``httpx.Response``.

    """
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = json_data
    return response


class TestDataApiClient:
    """Test suite for DataApiClient."""

    @pytest.fixture
    def client(self) -> DataApiClient:
        """Create a client pointing at test hosts."""
        return DataApiClient(
            data_api_url="https://data.test/",
            safe_client_url="https://safe.test",
        )

    def test_trailing_slash_stripped(self, client: DataApiClient) -> None:
        """Strip trailing slashes from base URLs."""
        assert client.data_api_url == "https://data.test"

    @pytest.mark.asyncio
    async def test_get_safes_found(self, client: DataApiClient) -> None:
        """Return the registry's safes for the owner on Polygon."""
        mock_request = AsyncMock(return_value=_response(json_data={"safes": [_SAFE]}))
        with patch.object(client._http_client, "request", new=mock_request):
            result = await client.get_safes(_OWNER)

        assert result == SafeLookup(outcome=ProbeOutcome.FOUND, safes=(_SAFE,))
        url = mock_request.call_args.args[1]
        assert url == f"https://safe.test/v1/chains/137/owners/{_OWNER}/safes"

    @pytest.mark.asyncio
    async def test_get_safes_empty(self, client: DataApiClient) -> None:
        """Report no safes for an owner without any."""
        with patch.object(
            client._http_client,
            "request",
            new=AsyncMock(return_value=_response(json_data={"safes": []})),
        ):
            result = await client.get_safes(_OWNER)

        assert result.outcome is ProbeOutcome.NOT_FOUND
        assert result.safes == ()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("status_code", "expected"),
        [
            (_STATUS_NOT_FOUND, ProbeOutcome.NOT_FOUND),
            (_STATUS_SERVER_ERROR, ProbeOutcome.TRANSIENT_ERROR),
        ],
    )
    async def test_get_safes_error_status(
        self, client: DataApiClient, status_code: int, expected: ProbeOutcome
    ) -> None:
        """Map client errors to no signal and server errors to transient."""
        with patch.object(
            client._http_client,
            "request",
            new=AsyncMock(return_value=_response(status_code=status_code)),
        ):
            result = await client.get_safes(_OWNER)

        assert result.outcome is expected

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("body", "expected"),
        [
            ([{"user": _OWNER, "value": 12.5}], ProbeOutcome.FOUND),
            ({"value": "0.01"}, ProbeOutcome.FOUND),
            ([{"user": _OWNER, "value": 0}], ProbeOutcome.NOT_FOUND),
            ([], ProbeOutcome.NOT_FOUND),
            ({"value": "not-a-number"}, ProbeOutcome.NOT_FOUND),
            ({"value": "NaN"}, ProbeOutcome.NOT_FOUND),
        ],
    )
    async def test_probe_value(
        self, client: DataApiClient, body: Any, expected: ProbeOutcome
    ) -> None:
        """Treat only a positive finite value as a funding signal."""
        mock_request = AsyncMock(return_value=_response(json_data=body))
        with patch.object(client._http_client, "request", new=mock_request):
            result = await client.probe_value(_OWNER)

        assert result is expected
        assert mock_request.call_args.kwargs["params"] == {"user": _OWNER}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("body", "expected"),
        [
            ([{"asset": "123", "size": 5}], ProbeOutcome.FOUND),
            ([], ProbeOutcome.NOT_FOUND),
            ({"error": "bad user"}, ProbeOutcome.NOT_FOUND),
        ],
    )
    async def test_probe_positions(
        self, client: DataApiClient, body: Any, expected: ProbeOutcome
    ) -> None:
        """Treat a non-empty positions list as a funding signal."""
        mock_request = AsyncMock(return_value=_response(json_data=body))
        with patch.object(client._http_client, "request", new=mock_request):
            result = await client.probe_positions(_OWNER)

        assert result is expected
        assert mock_request.call_args.args[1] == "https://data.test/positions"

    @pytest.mark.asyncio
    async def test_transport_error_is_transient(self, client: DataApiClient) -> None:
        """Report a connection failure as transient instead of raising."""
        with patch.object(
            client._http_client,
            "request",
            new=AsyncMock(side_effect=httpx.ConnectError("connection refused")),
        ):
            result = await client.probe_value(_OWNER)

        assert result is ProbeOutcome.TRANSIENT_ERROR

    @pytest.mark.asyncio
    async def test_unreadable_body_is_transient(self, client: DataApiClient) -> None:
        """Report a non-JSON body as transient."""
        response = _response()
        response.json.side_effect = ValueError("Expecting value")
        with patch.object(client._http_client, "request", new=AsyncMock(return_value=response)):
            result = await client.probe_positions(_OWNER)

        assert result is ProbeOutcome.TRANSIENT_ERROR

    @pytest.mark.asyncio
    async def test_close_owned_client(self) -> None:
        """Close the HTTP client the instance created."""
        client = DataApiClient()
        with patch.object(client._http_client, "aclose", new=AsyncMock()) as mock_close:
            async with client:
                pass

        mock_close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_shared_client_left_open(self) -> None:
        """Leave a caller-supplied HTTP client open."""
        shared = MagicMock(spec=httpx.AsyncClient)
        shared.aclose = AsyncMock()
        client = DataApiClient(shared)

        await client.close()

        shared.aclose.assert_not_awaited()
