from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required for cache writes and background jobs

    # LLM gateway (OpenAI-compatible chat completions)
    llm_gateway_url: str = "https://ai.gateway.lovable.dev/v1/chat/completions"
    llm_api_key: Optional[str] = Field(default=None, validation_alias=AliasChoices("llm_api_key", "lovable_api_key"))
    llm_model: str = "google/gemini-2.5-flash"
    llm_timeout_seconds: float = 120.0

    # TTS providers
    openai_api_key: Optional[str] = None
    openai_base_url: str = "https://api.openai.com/v1"
    commentary_model: str = "gpt-4o"
    elevenlabs_api_key: Optional[str] = None
    elevenlabs_base_url: str = "https://api.elevenlabs.io/v1"
    elevenlabs_model: str = "eleven_multilingual_v2"
    speechify_api_key: Optional[str] = None
    speechify_base_url: str = "https://api.sws.speechify.com/v1"
    tts_default_voice: str = "onyx"
    tts_timeout_seconds: float = 60.0

    # Audio storage: "supabase" (Storage bucket) or "s3"
    audio_storage_backend: str = "supabase"
    audio_bucket: str = "bible-audio"

    # AWS S3 (only when audio_storage_backend == "s3")
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_region: str = "us-east-1"
    s3_bucket_name: Optional[str] = None
    s3_public_base_url: Optional[str] = None  # e.g. CDN in front of the bucket

    # Narration client
    narration_api_url: str = "http://localhost:8000/api/v1"
    narration_timeout_seconds: float = 10.0
    narration_default_voice: str = "daniel"
    narration_mode: str = "auto"  # auto | cloud | device
    narration_chunk_chars: int = 200
    narration_chunk_pause_ms: int = 250
    narration_verse_pause_ms: int = 100
    narration_prefetch_ahead: int = 2
    network_probe_url: str = "https://www.gstatic.com/generate_204"

    # Churches
    invitation_ttl_days: int = 30
    invitation_sweep_enabled: bool = False
    invitation_sweep_interval_seconds: int = 300

    # App
    app_name: str = "palace-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    rate_limit_enabled: bool = True

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
        extra="ignore",
        populate_by_name=True,
    )


settings = Settings()
