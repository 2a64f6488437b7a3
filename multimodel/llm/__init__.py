"""Provider adapters.

This package intentionally contains ONLY model inference adapters.

Rules:
- No credential resolution here (adapters borrow a Credential per call).
- No fan-out or aggregation here.
- No retries.

Those belong in orchestration layers.
"""
from .base import (
    Credential,
    CredentialSource,
    EmbeddingAdapter,
    EmbeddingRequest,
    EmbeddingResult,
    InputType,
    ProviderAdapter,
    ProviderId,
    QueryAdapter,
    QueryRequest,
    QueryResult,
    RequestShape,
)
from .catalog import DEFAULT_CATALOG, ModelCatalog, ProviderModels
from .gemini import GeminiAdapter
from .openai_chat import OpenAIChatAdapter
from .openai_responses import OpenAIResponsesAdapter
from .registry import AdapterRegistry
from .voyage import VoyageEmbeddingAdapter
