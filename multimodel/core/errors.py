# ---------------------------------
# TYPED EXCEPTIONS
# ---------------------------------


class RouterError(Exception):
    """Base class for every error the query router reports to a tool caller."""


class MalformedRequest(RouterError, ValueError):
    """Raised when a request is rejected before any network call is attempted."""


class UnknownTool(MalformedRequest):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'Unknown tool: {name}')


class CredentialsUnavailable(RouterError):
    """Raised when neither the vault nor the environment holds a key for a provider."""

    def __init__(self, provider: str) -> None:
        self.provider = provider
        super().__init__(f'No API key found for {provider} (checked Vault and env)')


class ProviderCallFailed(RouterError):
    """Raised when a provider call fails at the transport level or returns a non-2xx status."""

    def __init__(self, provider: str, message: str, *, status_code: int | None = None) -> None:
        self.provider = provider
        self.message = message
        self.status_code = status_code
        super().__init__(message)
