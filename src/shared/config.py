from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROXY_SERVER_URL: str = "http://localhost:3000/api"   # CORS relay (harbors, depth WMS)
    TILE_SERVER_URL: str = "https://tiles.openseamap.org"
    API_BASE_URL: str = "https://map.openseamap.org/api"
    GEOLOCATION_URL: str = "http://ip-api.com/json"

    API_RATE_LIMIT: float = 5.0          # outbound requests per second
    CACHE_TTL_SECONDS: float = 1800.0
    REQUEST_TIMEOUT_SECONDS: float = 15.0
    GEOLOCATION_TIMEOUT_SECONDS: float = 5.0

    SETTINGS_PATH: str = "data/map_settings.json"
    LOG_LEVEL: str = "INFO"
    PORT: int = 8000

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
