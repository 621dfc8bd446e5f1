import json
from typing import Annotated, Any, List

from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from pydantic import Field, field_validator

class Settings(BaseSettings):
	gemini_api_key: str | None = Field(default=None, validation_alias="GEMINI_API_KEY")
	# Provider can be "vertex" (Vertex AI Express) or "ai_studio" (Generative Language API)
	gemini_provider: str = Field(default="ai_studio", validation_alias="GEMINI_PROVIDER")
	gemini_model: str = Field(default="gemini-2.0-flash", validation_alias="GEMINI_MODEL")
	# Vertex configuration
	vertex_region: str = Field(default="us-central1", validation_alias="GEMINI_VERTEX_REGION")
	vertex_project: str | None = Field(default=None, validation_alias="GEMINI_VERTEX_PROJECT")
	# Upper bound for a single generation or marking call, in seconds
	model_timeout_seconds: float = Field(default=120.0, validation_alias="MODEL_TIMEOUT_SECONDS")

	# Image-by-description service (Paper 1 picture prompts)
	image_base_url: str = Field(default="https://image.pollinations.ai/prompt/", validation_alias="IMAGE_BASE_URL")
	image_width: int = Field(default=1024, validation_alias="IMAGE_WIDTH")
	image_height: int = Field(default=768, validation_alias="IMAGE_HEIGHT")
	image_timeout_seconds: float = Field(default=45.0, validation_alias="IMAGE_TIMEOUT_SECONDS")
	# When true the URL is fetched once so the service renders (and caches) it before the paper is returned
	image_prefetch: bool = Field(default=True, validation_alias="IMAGE_PREFETCH")

	# Prompt sizing
	source_excerpt_chars: int = Field(default=300, validation_alias="SOURCE_EXCERPT_CHARS")
	model_answers_excerpt_chars: int = Field(default=1000, validation_alias="MODEL_ANSWERS_EXCERPT_CHARS")

	# Comma-separated ("https://a.example,https://b.example") or a JSON list
	cors_origins: Annotated[List[str], NoDecode] = Field(default_factory=lambda: ["*"], validation_alias="CORS_ORIGINS")
	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

	@field_validator("cors_origins", mode="before")
	@classmethod
	def _split_origins(cls, value: Any) -> Any:
		if not isinstance(value, str):
			return value
		if value.strip().startswith("["):
			return json.loads(value)
		return [origin.strip() for origin in value.split(",") if origin.strip()]

settings = Settings()
