"""
Networks - Kaspa node endpoint and a minimal JSON/HTTP client.

Node endpoints vary between Kaspa node builds. The paths below are
placeholders and can be changed per NodeConfig. Only balance queries and
broadcasting an already-built transaction are supported.
"""

import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


DEFAULT_NODE_URL = "http://127.0.0.1:16110"


class NodeError(Exception):
    """Node request failed, or the node returned an unexpected body."""


# ============================================
# Node Configuration
# ============================================

@dataclass
class NodeConfig:
    """Where to reach a node and which paths it serves."""
    base_url: str = DEFAULT_NODE_URL
    balance_path: str = "/v1/addresses/{address}/balance"
    broadcast_path: str = "/v1/txs"
    timeout: float = 10.0

    def url(self, path: str) -> str:
        return self.base_url.rstrip("/") + path


# ============================================
# Node Client
# ============================================

class NodeClient:
    """Talks to a node's JSON/HTTP API."""

    def __init__(self, base_url: str = DEFAULT_NODE_URL, timeout: float = 10.0,
                 config: Optional[NodeConfig] = None):
        """
        Initialize node client.

        Args:
            base_url: Node endpoint, e.g. http://127.0.0.1:16110
            timeout: Per-request timeout in seconds
            config: Full NodeConfig (overrides base_url/timeout)
        """
        self.config = config or NodeConfig(base_url=base_url, timeout=timeout)

    def _request(self, method: str, url: str, body: Optional[dict] = None):
        data = json.dumps(body).encode() if body is not None else None
        req = urllib.request.Request(
            url,
            data=data,
            method=method,
            headers={"Content-Type": "application/json", "Accept": "application/json"}
        )

        logger.debug(f"{method} {url}")
        try:
            with urllib.request.urlopen(req, timeout=self.config.timeout) as resp:
                raw = resp.read().decode()
        except urllib.error.HTTPError as e:
            detail = e.read().decode(errors="replace")
            raise NodeError(f"RPC error {e.code}: {detail}") from e
        except (urllib.error.URLError, OSError) as e:
            raise NodeError(f"Cannot reach node at {self.config.base_url}: {e}") from e

        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise NodeError(f"Node returned invalid JSON: {raw[:200]!r}") from e

    def get_balance(self, address: str) -> dict[str, int]:
        """
        Query the balance for an address.

        Returns: mapping such as {"confirmed": 100, "unconfirmed": 0}
        """
        path = self.config.balance_path.format(address=urllib.parse.quote(address, safe=":"))
        data = self._request("GET", self.config.url(path))

        if not isinstance(data, dict):
            raise NodeError(f"Unexpected balance response: {data!r}")

        balances = {}
        for key, value in data.items():
            # bool is an int subclass but never a balance
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise NodeError(f"Invalid balance value for {key!r}: {value!r}")
            balances[str(key)] = value
        return balances

    def broadcast(self, tx_hex: str) -> str:
        """
        Submit a hex-serialized transaction.

        Returns: the node's JSON response, re-serialized as text
        """
        try:
            bytes.fromhex(tx_hex)
        except ValueError as e:
            raise NodeError("Transaction must be hex-encoded") from e

        data = self._request("POST", self.config.url(self.config.broadcast_path), {"tx": tx_hex})
        logger.info("Transaction submitted to node")
        return json.dumps(data)
