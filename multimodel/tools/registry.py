"""
A canonical tool registry
"""

from __future__ import annotations

from typing import Any

from multimodel.llm.base import ProviderId
from multimodel.llm.catalog import DEFAULT_CATALOG, ModelCatalog
from multimodel.schemas import ARGUMENT_MODELS, ToolName


def _describe(catalog: ModelCatalog) -> dict[str, str]:
    openai = catalog.models(ProviderId.OPENAI)
    gemini = catalog.models(ProviderId.GOOGLE)
    voyage = catalog.models(ProviderId.VOYAGE)
    return {
        ToolName.QUERY_OPENAI.value: f'Query OpenAI models ({", ".join(openai.available)})',
        ToolName.QUERY_GEMINI.value: f'Query Gemini models ({", ".join(gemini.available)})',
        ToolName.EMBED_VOYAGE.value: f'Get Voyage AI embeddings ({voyage.default})',
        ToolName.PARALLEL_QUERY.value: (
            'Query OpenAI and Gemini in parallel for cross-validation. '
            'Results are keyed by provider id: "openai" and "google" (Gemini), '
            'each holding a result or {"error": ...}'
        ),
    }


def list_tools(catalog: ModelCatalog = DEFAULT_CATALOG) -> list[dict[str, Any]]:
    """Tool descriptors with a JSON schema per tool, in ToolName order."""
    descriptions = _describe(catalog)
    return [
        {
            'name': tool.value,
            'description': descriptions[tool.value],
            'input_schema': ARGUMENT_MODELS[tool].model_json_schema(),
        }
        for tool in ToolName
    ]
