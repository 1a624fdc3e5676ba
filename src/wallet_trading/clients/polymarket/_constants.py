"""Shared constants for the Polymarket client modules.

This is the only module that imports from ``py_clob_client``; chain and
side identifiers are taken from the reference client so they cannot
drift from what the exchange expects.
"""

from py_clob_client.constants import POLYGON  # type: ignore[import-untyped]
from py_clob_client.order_builder.constants import BUY, SELL  # type: ignore[import-untyped]

HTTP_OK = 200
HTTP_MULTIPLE_CHOICES = 300
HTTP_BAD_REQUEST = 400
HTTP_CONFLICT = 409
HTTP_TOO_MANY_REQUESTS = 429
HTTP_INTERNAL_ERROR = 500

CLOB_HOST = "https://clob.polymarket.com"
DATA_API_URL = "https://data-api.polymarket.com"
SAFE_CLIENT_URL = "https://safe-client.safe.global"

POLYGON_CHAIN_ID: int = POLYGON
SIDE_BUY: str = BUY
SIDE_SELL: str = SELL

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
CTF_EXCHANGE_ADDRESS = "0x4bFb41d5B3570DeFd03C39a9A4D8dE6Bd8B8982E"

# Exchange REST paths
TIME_PATH = "/time"
BALANCES_PATH = "/balances"
CREATE_API_KEY_PATH = "/auth/api-key"
DERIVE_API_KEY_PATH = "/auth/derive-api-key"
API_KEYS_PATH = "/auth/api-keys"
ACCESS_STATUS_PATH = "/auth/access-status"
ORDER_PATH = "/order"

# Authentication header names
POLY_ADDRESS = "POLY_ADDRESS"
POLY_SIGNATURE = "POLY_SIGNATURE"
POLY_TIMESTAMP = "POLY_TIMESTAMP"
POLY_NONCE = "POLY_NONCE"
POLY_API_KEY = "POLY_API_KEY"
POLY_PASSPHRASE = "POLY_PASSPHRASE"

# USDC and outcome tokens both use 6 decimals on Polygon
TOKEN_DECIMALS = 6
