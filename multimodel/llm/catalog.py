"""Static model catalog.

Each provider lists its default model and the models it offers, tagged with the request
shape they are called with. The catalog is advisory: an id it does not know is passed
through to the provider with that provider's fallback shape, and the provider decides.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from multimodel.llm.base import ProviderId, RequestShape


@dataclass(frozen=True)
class ProviderModels:
    provider: ProviderId
    default: str
    shapes: dict[str, RequestShape] = field(default_factory=dict)
    fallback_shape: RequestShape = RequestShape.CHAT

    @property
    def available(self) -> list[str]:
        return list(self.shapes)

    def shape_for(self, model: str) -> RequestShape:
        return self.shapes.get(model, self.fallback_shape)


class ModelCatalog:
    """Lookup of provider -> models -> request shape."""

    def __init__(self, entries: list[ProviderModels]) -> None:
        self._entries = {entry.provider: entry for entry in entries}

    def __contains__(self, provider: object) -> bool:
        return provider in self._entries

    def models(self, provider: ProviderId) -> ProviderModels:
        try:
            return self._entries[provider]
        except KeyError:
            raise KeyError(f'No catalog entry for provider: {provider}') from None

    def default_model(self, provider: ProviderId) -> str:
        return self.models(provider).default

    def resolve_model(self, provider: ProviderId, model: str | None) -> str:
        return model or self.default_model(provider)

    def shape_for(self, provider: ProviderId, model: str) -> RequestShape:
        return self.models(provider).shape_for(model)

    def describe(self) -> dict[str, Any]:
        return {
            entry.provider.value: {
                'default': entry.default,
                'available': entry.available,
                'shapes': {model: shape.value for model, shape in entry.shapes.items()},
            }
            for entry in self._entries.values()
        }


DEFAULT_CATALOG = ModelCatalog(
    [
        ProviderModels(
            provider=ProviderId.OPENAI,
            default='gpt-5.2-pro-2025-12-11',
            shapes={
                'gpt-5.2-pro-2025-12-11': RequestShape.RESPONSES,
                'gpt-5.2-2025-12-11': RequestShape.CHAT,
            },
        ),
        ProviderModels(
            provider=ProviderId.GOOGLE,
            default='gemini-3-pro-preview',
            shapes={
                'gemini-3-pro-preview': RequestShape.CHAT,
                'gemini-2.5-pro': RequestShape.CHAT,
                'gemini-2.5-flash': RequestShape.CHAT,
            },
        ),
        ProviderModels(
            provider=ProviderId.VOYAGE,
            default='voyage-3',
            shapes={'voyage-3': RequestShape.EMBEDDING},
            fallback_shape=RequestShape.EMBEDDING,
        ),
    ]
)
