from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Supabase Vault (both values are required to enable the vault tier)
    supabase_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices('supabase_url', 'SUPABASE_URL', 'EXPO_PUBLIC_SUPABASE_URL'),
    )
    supabase_service_role_key: str | None = None

    # Environment fallback for provider keys
    openai_api_key: str | None = None
    gemini_api_key: str | None = None
    voyage_api_key: str | None = None

    # Provider endpoints
    openai_base_url: str = 'https://api.openai.com/v1'
    gemini_base_url: str = 'https://generativelanguage.googleapis.com/v1beta'
    voyage_base_url: str = 'https://api.voyageai.com/v1'

    request_timeout: float = 120.0
    default_max_tokens: int = 4096

    class Config:
        env_file = '.env.local'
        extra = 'ignore'
        populate_by_name = True


settings = Settings()
