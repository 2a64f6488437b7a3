from __future__ import annotations

import pytest

from multimodel.core.errors import CredentialsUnavailable
from multimodel.credentials import CredentialStore, SupabaseVault, VaultStatus
from multimodel.llm.base import CredentialSource, ProviderId

from tests.fixtures.fake_vault import FakeVault
from tests.fixtures.settings import make_settings

ENV_KEYS = {
    ProviderId.OPENAI: {"openai_api_key": "env-openai"},
    ProviderId.GOOGLE: {"gemini_api_key": "env-gemini"},
    ProviderId.VOYAGE: {"voyage_api_key": "env-voyage"},
}


@pytest.mark.asyncio
@pytest.mark.parametrize("provider", list(ProviderId))
async def test_resolve_without_vault_uses_environment(provider: ProviderId) -> None:
    # Arrange
    store = CredentialStore(make_settings(**ENV_KEYS[provider]))

    # Act
    credential = await store.resolve(provider)

    # Assert
    assert credential.source == CredentialSource.ENVIRONMENT
    assert credential.secret == next(iter(ENV_KEYS[provider].values()))
    assert store.vault_lookup(provider).status == VaultStatus.UNCONFIGURED


@pytest.mark.asyncio
@pytest.mark.parametrize("provider", list(ProviderId))
async def test_resolve_is_memoized(provider: ProviderId) -> None:
    # Arrange
    settings = make_settings(**ENV_KEYS[provider])
    vault = FakeVault()
    store = CredentialStore(settings, vault=vault)
    first = await store.resolve(provider)

    # Both tiers change after the first resolution; neither may be consulted again.
    for field in ENV_KEYS[provider]:
        setattr(settings, field, "rotated")
    vault_calls = len(vault.calls)

    # Act
    second = await store.resolve(provider)

    # Assert
    assert second is first
    assert second.secret == first.secret
    assert len(vault.calls) == vault_calls


@pytest.mark.asyncio
async def test_vault_value_takes_precedence_over_environment() -> None:
    # Arrange
    vault = FakeVault({"openai_api_key": "V"})
    store = CredentialStore(make_settings(openai_api_key="E"), vault=vault)

    # Act
    credential = await store.resolve(ProviderId.OPENAI)

    # Assert
    assert credential.secret == "V"
    assert credential.source == CredentialSource.VAULT
    assert vault.calls == ["openai_api_key"]
    assert store.vault_lookup(ProviderId.OPENAI).fell_back is False


@pytest.mark.asyncio
async def test_vault_uses_provider_key_names() -> None:
    vault = FakeVault({"gemini_api_key": "g", "voyage_api_key": "v"})
    store = CredentialStore(make_settings(), vault=vault)

    await store.resolve(ProviderId.GOOGLE)
    await store.resolve(ProviderId.VOYAGE)

    assert vault.calls == ["gemini_api_key", "voyage_api_key"]


@pytest.mark.asyncio
async def test_vault_error_falls_back_to_environment() -> None:
    # Arrange
    vault = FakeVault(error=RuntimeError("connection refused"))
    store = CredentialStore(make_settings(gemini_api_key="E"), vault=vault)

    # Act
    credential = await store.resolve(ProviderId.GOOGLE)

    # Assert: the error stays internal, recorded as a soft failure
    assert credential.secret == "E"
    assert credential.source == CredentialSource.ENVIRONMENT
    lookup = store.vault_lookup(ProviderId.GOOGLE)
    assert lookup.status == VaultStatus.FAILED
    assert lookup.error == "connection refused"
    assert lookup.fell_back is True


@pytest.mark.asyncio
@pytest.mark.parametrize("stored", ["", "   ", "\n\t"])
async def test_empty_vault_value_falls_back_to_environment(stored: str) -> None:
    vault = FakeVault({"voyage_api_key": stored})
    store = CredentialStore(make_settings(voyage_api_key="E"), vault=vault)

    credential = await store.resolve(ProviderId.VOYAGE)

    assert credential.source == CredentialSource.ENVIRONMENT
    assert store.vault_lookup(ProviderId.VOYAGE).status == VaultStatus.EMPTY


@pytest.mark.asyncio
async def test_missing_everywhere_raises_credentials_unavailable() -> None:
    store = CredentialStore(make_settings(openai_api_key="   "), vault=FakeVault())

    with pytest.raises(CredentialsUnavailable) as excinfo:
        await store.resolve(ProviderId.OPENAI)

    assert excinfo.value.provider == "openai"
    assert str(excinfo.value) == "No API key found for openai (checked Vault and env)"
    assert store.cached(ProviderId.OPENAI) is None


@pytest.mark.asyncio
async def test_failed_resolution_is_not_cached() -> None:
    settings = make_settings()
    store = CredentialStore(settings)

    with pytest.raises(CredentialsUnavailable):
        await store.resolve(ProviderId.VOYAGE)

    settings.voyage_api_key = "late"
    credential = await store.resolve(ProviderId.VOYAGE)

    assert credential.secret == "late"


def test_vault_client_requires_both_connection_values() -> None:
    only_url = CredentialStore(make_settings(supabase_url="https://project.supabase.co"))
    both = CredentialStore(
        make_settings(supabase_url="https://project.supabase.co", supabase_service_role_key="service")
    )

    assert only_url._vault_client() is None
    client = both._vault_client()
    assert isinstance(client, SupabaseVault)
    # Built once, reused afterwards
    assert both._vault_client() is client


def test_credential_repr_hides_secret() -> None:
    from multimodel.llm.base import Credential

    credential = Credential(ProviderId.OPENAI, "sk-secret", CredentialSource.VAULT)

    assert "sk-secret" not in repr(credential)
