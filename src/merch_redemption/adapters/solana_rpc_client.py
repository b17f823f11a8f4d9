"""Solana JSON-RPC client."""

import base64
import logging
from dataclasses import dataclass
from itertools import count
from typing import Any, Protocol

import httpx

from merch_redemption.errors import ResolutionError

FINALIZED = "finalized"

_logger = logging.getLogger(__name__)


class SolanaRpcClient(Protocol):
    """Read-only interface to a Solana RPC node."""

    async def get_balance(self, address: str) -> int:
        """Return the native balance of an address in lamports."""

    async def get_account_info(self, address: str) -> dict[str, object] | None:
        """Return raw account info with base64 data, or None if absent."""

    async def get_latest_blockhash(self, commitment: str = FINALIZED) -> str:
        """Return the latest blockhash at the given commitment."""

    async def get_program_accounts(
        self, program_id: str, filters: list[dict[str, object]]
    ) -> list[dict[str, object]]:
        """Return accounts owned by a program matching the filters."""


@dataclass
class HttpxSolanaRpcClient(SolanaRpcClient):
    """HTTPX-backed JSON-RPC client."""

    rpc_url: str
    http_client: httpx.AsyncClient
    timeout: float = 15

    def __post_init__(self) -> None:
        self._request_ids = count(1)

    @classmethod
    def create(cls, rpc_url: str) -> "HttpxSolanaRpcClient":
        """Create an RPC client with a managed httpx session."""
        return cls(rpc_url=rpc_url, http_client=httpx.AsyncClient())

    async def get_balance(self, address: str) -> int:
        """Fetch the lamport balance of an address."""
        result = await self._call("getBalance", [address, {"commitment": FINALIZED}])
        return int(result["value"])

    async def get_account_info(self, address: str) -> dict[str, object] | None:
        """Fetch account info, returning None when the account does not exist."""
        result = await self._call(
            "getAccountInfo",
            [address, {"encoding": "base64", "commitment": FINALIZED}],
        )
        return result["value"]

    async def get_latest_blockhash(self, commitment: str = FINALIZED) -> str:
        """Fetch a fresh blockhash for compiling a transaction."""
        result = await self._call("getLatestBlockhash", [{"commitment": commitment}])
        return result["value"]["blockhash"]

    async def get_program_accounts(
        self, program_id: str, filters: list[dict[str, object]]
    ) -> list[dict[str, object]]:
        """Fetch program accounts matching memcmp/dataSize filters."""
        result = await self._call(
            "getProgramAccounts",
            [
                program_id,
                {"encoding": "base64", "commitment": FINALIZED, "filters": filters},
            ],
        )
        return list(result)

    async def _call(self, method: str, params: list[object]) -> Any:
        body = {
            "jsonrpc": "2.0",
            "id": next(self._request_ids),
            "method": method,
            "params": params,
        }
        try:
            response = await self.http_client.post(
                self.rpc_url, json=body, timeout=self.timeout
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise ResolutionError() from exc
        error = payload.get("error")
        if error:
            _logger.warning("Solana RPC %s failed: %s", method, error)
            raise ResolutionError()
        return payload["result"]

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def account_data(account_info: dict[str, object]) -> bytes:
    """Return the decoded bytes of an account fetched with base64 encoding."""
    data = account_info.get("data")
    if isinstance(data, list) and data:
        return base64.b64decode(data[0])
    return b""
