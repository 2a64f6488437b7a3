"""Tiered credential resolution with process-lifetime memoization.

Resolution order for a provider:
1. The store's cache (no expiry, no rotation).
2. Supabase Vault, when both vault connection values are configured.
3. The provider's environment variable (process env or `.env.local`).

Vault errors are logged and treated exactly like "vault had no value".
"""

from __future__ import annotations

from multimodel.config import Settings
from multimodel.core.errors import CredentialsUnavailable
from multimodel.credentials.vault import SupabaseVault, VaultClient, VaultLookup, VaultStatus
from multimodel.llm.base import Credential, CredentialSource, ProviderId
from multimodel.observability.tracing import log_event

VAULT_KEY_NAMES: dict[ProviderId, str] = {
    ProviderId.OPENAI: 'openai_api_key',
    ProviderId.GOOGLE: 'gemini_api_key',
    ProviderId.VOYAGE: 'voyage_api_key',
}

# Settings field per provider; the field name doubles as the (case-insensitive) env var.
ENV_FIELDS: dict[ProviderId, str] = {
    ProviderId.OPENAI: 'openai_api_key',
    ProviderId.GOOGLE: 'gemini_api_key',
    ProviderId.VOYAGE: 'voyage_api_key',
}


class CredentialStore:
    """Resolves and caches one Credential per provider."""

    def __init__(self, settings: Settings, *, vault: VaultClient | None = None) -> None:
        """Create a store.

        Args:
            settings: Source of the vault connection values and the environment tier.
            vault: Optional injected vault client. When omitted, a SupabaseVault is built
                on first use if the settings carry both vault values.
        """
        self._settings = settings
        self._vault = vault
        self._vault_checked = vault is not None
        self._cache: dict[ProviderId, Credential] = {}
        self._vault_lookups: dict[ProviderId, VaultLookup] = {}

    def cached(self, provider: ProviderId) -> Credential | None:
        return self._cache.get(provider)

    def vault_lookup(self, provider: ProviderId) -> VaultLookup | None:
        """Outcome of the most recent vault attempt for `provider`, if one was made."""
        return self._vault_lookups.get(provider)

    async def resolve(self, provider: ProviderId) -> Credential:
        """Return the credential for `provider`, resolving it on first use.

        Raises:
            CredentialsUnavailable: If neither tier yields a non-empty value.
        """
        cached = self._cache.get(provider)
        if cached is not None:
            return cached

        lookup, secret = await self._from_vault(provider)
        self._vault_lookups[provider] = lookup
        if secret is not None:
            return self._remember(Credential(provider, secret, CredentialSource.VAULT))

        secret = self._from_environment(provider)
        if secret is not None:
            return self._remember(Credential(provider, secret, CredentialSource.ENVIRONMENT))

        raise CredentialsUnavailable(provider.value)

    def _remember(self, credential: Credential) -> Credential:
        # A concurrent resolution may have landed while the vault call was suspended;
        # the first cached credential wins so every caller sees the same value.
        stored = self._cache.setdefault(credential.provider, credential)
        if stored is credential:
            log_event(
                'credentials.resolved',
                provider=credential.provider.value,
                source=credential.source.value,
            )
        return stored

    def _vault_client(self) -> VaultClient | None:
        if not self._vault_checked:
            self._vault_checked = True
            url = self._settings.supabase_url
            key = self._settings.supabase_service_role_key
            if url and key:
                self._vault = SupabaseVault(url, key)
            else:
                log_event('credentials.vault_unavailable', reason='No Supabase credentials, Vault unavailable')
        return self._vault

    async def _from_vault(self, provider: ProviderId) -> tuple[VaultLookup, str | None]:
        key_name = VAULT_KEY_NAMES[provider]
        client = self._vault_client()
        if client is None:
            return VaultLookup(VaultStatus.UNCONFIGURED, key_name), None

        try:
            value = await client.get_api_key(key_name)
        except Exception as exc:  # noqa: BLE001 - vault failures fall back to env
            log_event('credentials.vault_failed', provider=provider.value, error=str(exc))
            return VaultLookup(VaultStatus.FAILED, key_name, error=str(exc)), None

        if not isinstance(value, str) or not value.strip():
            return VaultLookup(VaultStatus.EMPTY, key_name), None
        return VaultLookup(VaultStatus.FOUND, key_name), value.strip()

    def _from_environment(self, provider: ProviderId) -> str | None:
        value = getattr(self._settings, ENV_FIELDS[provider], None)
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None
