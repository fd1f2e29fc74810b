from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Google Maps (Directions + Places). Empty key = deterministic mock data.
    google_maps_api_key: str = ""
    google_maps_base_url: str = "https://maps.googleapis.com/maps/api"
    maps_language: str = "en"

    # Open-Meteo (no key required)
    open_meteo_base_url: str = "https://api.open-meteo.com/v1"

    # Provider / request timeouts (seconds)
    provider_timeout_seconds: float = 10.0
    optimize_timeout_seconds: float = 25.0

    # Redis
    redis_url: str = "redis://localhost:6379/0"

    # Caching
    optimize_cache_ttl: int = 300  # 5 minutes
    intervention_dedup_ttl: int = 600  # 10 minutes, 0 disables dedup

    # CORS
    cors_origins: str = "http://localhost:5173"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",")]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
