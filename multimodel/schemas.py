"""Schemas for tool calls and their arguments.

Pydantic is the validation layer at the tool boundary:
- Tool names are a closed enum.
- Each tool's argument model is validated before any network activity.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from multimodel.llm.base import InputType, ProviderId


class ToolName(str, Enum):
    """Tools exposed by the router."""

    QUERY_OPENAI = 'query_openai'
    QUERY_GEMINI = 'query_gemini'
    EMBED_VOYAGE = 'embed_voyage'
    PARALLEL_QUERY = 'parallel_query'


class QueryArgs(BaseModel):
    """Arguments shared by the single-provider query tools."""

    model_config = ConfigDict(extra='ignore')

    prompt: str = Field(description='The prompt to send')
    system_prompt: str | None = Field(default=None, description='Optional system prompt')
    model: str | None = Field(default=None, description='Model id (default: the catalog default)')
    max_tokens: int | None = Field(default=None, ge=1, description='Max output tokens')

    @field_validator('prompt')
    @classmethod
    def prompt_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError('prompt must not be blank')
        return value


class QueryOpenAIArgs(QueryArgs):
    pass


class QueryGeminiArgs(QueryArgs):
    pass


class EmbedVoyageArgs(BaseModel):
    model_config = ConfigDict(extra='ignore')

    text: str = Field(description='Text to embed')
    input_type: InputType = Field(default=InputType.DOCUMENT, description='Type (document or query)')

    @field_validator('text')
    @classmethod
    def text_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError('text must not be blank')
        return value


class ParallelQueryArgs(BaseModel):
    """Arguments for the cross-validation fan-out."""

    model_config = ConfigDict(extra='ignore')

    prompt: str = Field(description='Prompt for every model')
    system_prompt: str | None = Field(default=None, description='Optional system prompt')
    openai_model: str | None = Field(default=None, description='OpenAI model override')
    gemini_model: str | None = Field(default=None, description='Gemini model override')
    max_tokens: int | None = Field(default=None, ge=1, description='Max output tokens for every leg')
    providers: list[ProviderId] | None = Field(
        default=None,
        min_length=1,
        description='Subset of providers to query (default: openai and google)',
    )

    @field_validator('prompt')
    @classmethod
    def prompt_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError('prompt must not be blank')
        return value

    @field_validator('providers')
    @classmethod
    def query_providers_only(cls, value: list[ProviderId] | None) -> list[ProviderId] | None:
        if value is None:
            return None
        if ProviderId.VOYAGE in value:
            raise ValueError('voyage does not answer prompts')
        return list(dict.fromkeys(value))


ARGUMENT_MODELS: dict[ToolName, type[BaseModel]] = {
    ToolName.QUERY_OPENAI: QueryOpenAIArgs,
    ToolName.QUERY_GEMINI: QueryGeminiArgs,
    ToolName.EMBED_VOYAGE: EmbedVoyageArgs,
    ToolName.PARALLEL_QUERY: ParallelQueryArgs,
}


def validate_tool_args(tool_name: ToolName, args: dict[str, Any]) -> BaseModel:
    """Validate tool arguments for the given tool name.

    Args:
        tool_name: ToolName enum.
        args: Raw args dict.

    Returns:
        A validated Pydantic model instance for that tool's args.

    Raises:
        ValidationError: If args are invalid for the tool.
    """
    return ARGUMENT_MODELS[tool_name].model_validate(args)
