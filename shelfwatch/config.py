from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class AppConfig(BaseSettings):
    """Application configuration using Pydantic BaseSettings.

    Loads configuration from environment variables and .env file (if present).
    Fields are type-checked and validated. Defaults are provided where appropriate.
    """
    # Vision (fal.ai)
    fal_key: Optional[str] = None
    fal_base_url: str = "https://fal.run"
    fal_model: str = "fal-ai/moondream2/visual-query"
    fal_prompt: str = (
        "List every distinct product visible on the shelf, one per line, "
        "in the form '<quantity> x <product name>'."
    )

    # Supplier search (Valyu)
    valyu_api_key: Optional[str] = None
    valyu_base_url: str = "https://api.valyu.ai/v1"

    # Reasoning (OpenAI)
    openai_api_key: Optional[str] = None
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o-mini"
    openai_temperature: float = 0.3

    # Conversational agent (ElevenLabs)
    elevenlabs_api_key: Optional[str] = None
    elevenlabs_base_url: str = "https://api.elevenlabs.io/v1"
    elevenlabs_agent_id: Optional[str] = None

    # Collaborator timeouts (seconds)
    vision_timeout: float = 60.0
    search_timeout: float = 45.0
    reasoning_timeout: float = 60.0
    conversation_timeout: float = 30.0

    # Application
    app_env: str = "local"
    log_level: str = "DEBUG"

    # Data paths
    data_dir: str = "sample_data"

    # Analysis windows
    trend_window_days: int = 7
    stock_out_window_days: int = 14
    reorder_window_days: int = 30
    default_lead_time_days: int = 3
    forecast_days: int = 30

    # Supplier search
    supplier_search_max_results: int = 5
    supplier_search_location: Optional[str] = None
    supplier_cache_ttl_seconds: int = 3600

    # Seed data settings
    default_seed_scale: str = "small"
    default_seed_days: int = 30
    default_seed_value: int = 42

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

_config: Optional[AppConfig] = None

def get_config() -> AppConfig:
    """Return the AppConfig instance (singleton pattern)."""
    global _config
    if _config is None:
        _config = AppConfig()
    return _config

def set_config_for_test(**kwargs):
    """For testing only: override the AppConfig instance with new values."""
    global _config
    _config = AppConfig(**kwargs)
