# visionboard_imaging/data/settings.py
from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeminiConfig(BaseModel):
    """Credentials for the Google Gen AI backend."""
    client: str = "google"  # "google" or "mock"
    api_key: SecretStr | None = None
    vertexai: bool = False
    project_id: str | None = None
    location: str = "global"
    service_account_creds_json: SecretStr | None = None


class ImageModelsConfig(BaseModel):
    """
    Ordered backend models for likeness-preserving synthesis.

    The fallback order is hand-curated: the primary model first, then the model with
    the best observed success rate on reference-image requests, then the secondary.
    Set a slot to an empty string to drop it from the chain.
    """
    primary: str = "gemini-3-pro-image-preview"
    reliable: str = "gemini-2.5-flash-image"
    secondary: str = "gemini-2.0-flash-preview-image-generation"
    last_resort: str = "imagen-4.0-generate-001"
    validator: str = "gemini-2.5-flash"
    attempt_timeout_s: float | None = 120.0

    @property
    def fallback_chain(self) -> tuple[str, ...]:
        chain: list[str] = []
        for model in (self.primary, self.reliable, self.secondary):
            model = model.strip()
            if model and model not in chain:
                chain.append(model)
        return tuple(chain)


class ServerConfig(BaseModel):
    listening_host: str = "0.0.0.0"
    listening_port: int = 8080


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    image_models: ImageModelsConfig = Field(default_factory=ImageModelsConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    premium_tiers: list[str] = Field(default_factory=lambda: ["PRO", "ELITE"])
    default_scene: str = "Create a beautiful, inspiring vision board image."

    logging_level: int = 20


settings = Settings()
