from __future__ import annotations

import asyncio

import httpx
import pytest

from multimodel.core.errors import CredentialsUnavailable, MalformedRequest, ProviderCallFailed
from multimodel.credentials import CredentialStore
from multimodel.llm import AdapterRegistry, CredentialSource, EmbeddingRequest, ProviderId, QueryRequest, QueryResult
from multimodel.runtime.orchestrator import LegFailure, QueryOrchestrator

from tests.fixtures.fake_vault import FakeVault
from tests.fixtures.provider_stub import provider_stub, recording_transport, request_json
from tests.fixtures.settings import make_settings

ALL_KEYS = {"openai_api_key": "sk-env", "gemini_api_key": "g-env", "voyage_api_key": "v-env"}


def build_orchestrator(client: httpx.AsyncClient, *, vault: FakeVault | None = None, **keys: str) -> QueryOrchestrator:
    settings = make_settings(**(keys or ALL_KEYS))
    return QueryOrchestrator(
        credentials=CredentialStore(settings, vault=vault),
        adapters=AdapterRegistry(settings, client=client),
    )


@pytest.mark.asyncio
async def test_query_single_fills_default_model_and_uses_responses_shape() -> None:
    # Arrange
    transport, seen = recording_transport()

    async with httpx.AsyncClient(transport=transport) as client:
        orch = build_orchestrator(client)

        # Act
        result = await orch.query_single(ProviderId.OPENAI, QueryRequest(prompt="Hi"))

    # Assert
    assert result.content == "ab"
    assert result.credential_source == CredentialSource.ENVIRONMENT
    assert seen[0].url.path.endswith("/responses")
    assert request_json(seen[0])["model"] == "gpt-5.2-pro-2025-12-11"


@pytest.mark.asyncio
async def test_query_single_passes_unknown_model_through() -> None:
    transport, seen = recording_transport()

    async with httpx.AsyncClient(transport=transport) as client:
        orch = build_orchestrator(client)
        await orch.query_single(ProviderId.OPENAI, QueryRequest(prompt="Hi", model="gpt-from-the-future"))

    assert seen[0].url.path.endswith("/chat/completions")
    assert request_json(seen[0])["model"] == "gpt-from-the-future"


@pytest.mark.asyncio
async def test_query_single_reports_vault_source() -> None:
    transport, _ = recording_transport()

    async with httpx.AsyncClient(transport=transport) as client:
        orch = build_orchestrator(client, vault=FakeVault({"gemini_api_key": "from-vault"}))
        result = await orch.query_single(ProviderId.GOOGLE, QueryRequest(prompt="Hi"))

    assert result.credential_source == CredentialSource.VAULT
    assert result.to_payload()["key_source"] == "vault"


@pytest.mark.asyncio
@pytest.mark.parametrize("prompt", ["", "   "])
async def test_blank_prompt_is_rejected_before_any_network_call(prompt: str) -> None:
    # Arrange
    transport, seen = recording_transport()
    vault = FakeVault({"openai_api_key": "V"})

    async with httpx.AsyncClient(transport=transport) as client:
        orch = build_orchestrator(client, vault=vault)

        # Act / Assert
        with pytest.raises(MalformedRequest):
            await orch.query_single(ProviderId.OPENAI, QueryRequest(prompt=prompt))
        with pytest.raises(MalformedRequest):
            await orch.query_parallel(prompt)

    assert seen == []
    assert vault.calls == []


@pytest.mark.asyncio
async def test_query_single_propagates_provider_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": {"message": "server exploded"}})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        orch = build_orchestrator(client)
        with pytest.raises(ProviderCallFailed, match="server exploded"):
            await orch.query_single(ProviderId.GOOGLE, QueryRequest(prompt="Hi"))


@pytest.mark.asyncio
async def test_query_parallel_contains_a_failing_leg() -> None:
    # Arrange: Gemini fails at the transport level, OpenAI succeeds
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith(":generateContent"):
            raise httpx.ConnectError("simulated outage", request=request)
        return provider_stub(request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        orch = build_orchestrator(client)

        # Act
        batch = await orch.query_parallel("Compare answers", "Be brief.")

    # Assert
    assert set(batch.outcomes) == {"openai", "google"}
    assert isinstance(batch.outcomes["openai"], QueryResult)
    assert isinstance(batch.outcomes["google"], LegFailure)
    assert "simulated outage" in batch.outcomes["google"].error

    payload = batch.to_payload()
    assert payload["openai"]["content"] == "ab"
    assert set(payload["google"]) == {"error"}


@pytest.mark.asyncio
async def test_query_parallel_contains_missing_credentials() -> None:
    transport, seen = recording_transport()

    async with httpx.AsyncClient(transport=transport) as client:
        orch = build_orchestrator(client, gemini_api_key="g-env")
        batch = await orch.query_parallel("Hi")

    assert batch.outcomes["openai"] == LegFailure(error=str(CredentialsUnavailable("openai")))
    assert isinstance(batch.outcomes["google"], QueryResult)
    assert len(seen) == 1


@pytest.mark.asyncio
async def test_query_parallel_attributes_out_of_order_completions() -> None:
    # Arrange: the first-started leg finishes last
    finished: list[str] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        if "openai" in request.url.host:
            await asyncio.sleep(0.05)
            finished.append("openai")
        else:
            finished.append("google")
        return provider_stub(request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        orch = build_orchestrator(client)

        # Act
        batch = await orch.query_parallel("Hi")

    # Assert
    assert finished == ["google", "openai"]
    assert list(batch.outcomes) == ["openai", "google"]
    assert batch.outcomes["openai"].content == "ab"
    assert batch.outcomes["google"].content == "gemini answer"


@pytest.mark.asyncio
async def test_query_parallel_legs_overlap() -> None:
    in_flight = 0
    peak = 0

    async def handler(request: httpx.Request) -> httpx.Response:
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        return provider_stub(request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        orch = build_orchestrator(client)
        await orch.query_parallel("Hi")

    assert peak == 2


@pytest.mark.asyncio
async def test_query_parallel_applies_model_overrides_and_subset() -> None:
    transport, seen = recording_transport()

    async with httpx.AsyncClient(transport=transport) as client:
        orch = build_orchestrator(client)
        batch = await orch.query_parallel("Hi", selections={ProviderId.GOOGLE: "gemini-2.5-flash"}, max_output_tokens=32)

    assert list(batch.outcomes) == ["google"]
    assert seen[0].url.path.endswith("/models/gemini-2.5-flash:generateContent")
    assert request_json(seen[0])["generationConfig"] == {"maxOutputTokens": 32}


@pytest.mark.asyncio
async def test_query_parallel_requires_a_selection() -> None:
    async with httpx.AsyncClient(transport=httpx.MockTransport(provider_stub)) as client:
        orch = build_orchestrator(client)
        with pytest.raises(MalformedRequest):
            await orch.query_parallel("Hi", selections={})


@pytest.mark.asyncio
async def test_embed_uses_voyage_default_model() -> None:
    transport, seen = recording_transport()

    async with httpx.AsyncClient(transport=transport) as client:
        orch = build_orchestrator(client)
        result = await orch.embed(EmbeddingRequest(text="hello"))

    assert result.dimensions == 1024
    assert request_json(seen[0])["model"] == "voyage-3"


@pytest.mark.asyncio
async def test_embed_rejects_blank_text_without_network() -> None:
    transport, seen = recording_transport()

    async with httpx.AsyncClient(transport=transport) as client:
        orch = build_orchestrator(client)
        with pytest.raises(MalformedRequest):
            await orch.embed(EmbeddingRequest(text=""))

    assert seen == []
