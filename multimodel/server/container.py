# --------------------------------
# DI container
# --------------------------------

from functools import lru_cache

from multimodel.config import Settings, settings as default_settings
from multimodel.credentials.store import CredentialStore
from multimodel.llm.registry import AdapterRegistry
from multimodel.runtime.gateway import ToolGateway
from multimodel.runtime.orchestrator import QueryOrchestrator


class Container:
    """Process-wide wiring. Owns the credential cache and the shared HTTP client."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        credentials: CredentialStore | None = None,
        adapters: AdapterRegistry | None = None,
    ):
        self._settings = settings or default_settings
        self._credentials = credentials or CredentialStore(self._settings)
        self._adapters = adapters or AdapterRegistry(self._settings)
        self._orchestrator = QueryOrchestrator(
            credentials=self._credentials,
            adapters=self._adapters,
        )
        self._gateway = ToolGateway(self._orchestrator)

    @property
    def orchestrator(self) -> QueryOrchestrator:
        return self._orchestrator

    @property
    def gateway(self) -> ToolGateway:
        return self._gateway

    async def aclose(self) -> None:
        await self._adapters.aclose()


@lru_cache
def get_container():
    return Container()
