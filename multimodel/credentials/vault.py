"""Supabase Vault client.

Keys are read through the `get_api_key(key_name)` Postgres function, exposed by
Supabase as an RPC. The service role key is required because the function reads
`vault.decrypted_secrets`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from supabase import AsyncClient, acreate_client


class VaultClient(Protocol):
    async def get_api_key(self, key_name: str) -> str | None:
        """Return the secret stored under `key_name`, or None when there is none."""
        ...


class VaultStatus(str, Enum):
    FOUND = 'found'
    UNCONFIGURED = 'unconfigured'
    EMPTY = 'empty'
    FAILED = 'failed'


@dataclass(frozen=True)
class VaultLookup:
    """Outcome of one vault attempt.

    Anything other than FOUND is a soft failure: the store falls through to the
    environment tier and the caller never sees the difference.
    """

    status: VaultStatus
    key_name: str
    error: str | None = None

    @property
    def fell_back(self) -> bool:
        return self.status != VaultStatus.FOUND


class SupabaseVault:
    """VaultClient backed by a Supabase project. The underlying client is created on first use."""

    rpc_name = 'get_api_key'

    def __init__(self, url: str, service_role_key: str) -> None:
        self._url = url
        self._service_role_key = service_role_key
        self._client: AsyncClient | None = None

    async def _connect(self) -> AsyncClient:
        if self._client is None:
            self._client = await acreate_client(self._url, self._service_role_key)
        return self._client

    async def get_api_key(self, key_name: str) -> str | None:
        client = await self._connect()
        result = await client.rpc(self.rpc_name, {'key_name': key_name}).execute()
        data = result.data
        if isinstance(data, str) and data:
            return data
        return None
