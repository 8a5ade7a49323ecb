from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Dict, Literal, Optional

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # App
    app_name: str = Field(default="Airport Lookup")
    env: str = Field(default="development")
    log_level: str = Field(default="INFO")

    # Network safety
    http_timeout_seconds: float = Field(default=5.0)

    # Reference search store (Supabase / PostgREST)
    airport_store: Literal["supabase", "csv"] = Field(default="supabase")
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    airports_table: str = Field(default="airports_search")
    airports_csv_path: Optional[str] = None  # defaults to the bundled data/airports_search.csv

    # Response cache (Upstash-compatible Redis REST). Read-only token is enough for lookups.
    kv_rest_api_url: Optional[str] = None
    kv_rest_api_token: Optional[str] = None
    kv_rest_api_read_only_token: Optional[str] = None
    airport_cache_ttl_seconds: int = Field(default=60 * 60 * 24 * 7)
    memory_cache_maxsize: int = Field(default=10_000, ge=1)  # used when no KV REST URL is set

    # Search behaviour
    search_default_limit: int = Field(default=15, ge=1, le=30)
    search_max_limit: int = Field(default=30, ge=1, le=30)
    search_overfetch: int = Field(default=100, ge=1, le=100)
    home_country_code: str = Field(default="US")
    facility_weights: Dict[str, int] = Field(
        default_factory=lambda: {"large_airport": 3, "medium_airport": 2, "small_airport": 1}
    )

settings = Settings()
