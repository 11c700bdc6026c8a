from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Amadeus
    amadeus_client_id: str = ""
    amadeus_client_secret: str = ""
    amadeus_base_url: str = "https://test.api.amadeus.com"
    amadeus_timeout_seconds: float = 30.0

    # Geocoding (OpenStreetMap Nominatim)
    geocoder_base_url: str = "https://nominatim.openstreetmap.org"
    geocoder_user_agent: str = "StayCompare/0.1 (hotel comparison)"
    geocoder_result_limit: int = 8

    # Auth: tokens are issued by the external identity provider
    auth_jwt_secret: str = "change-me-in-production"
    auth_jwt_algorithm: str = "HS256"
    auth_jwt_audience: str = ""

    # Hotel search
    search_page_size: int = 10

    # Comparison selection
    compare_store_path: str = "data/compare_selection.json"
    compare_max_hotels: int = 5

    # CORS
    cors_origins: str = "http://localhost:5173"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",")]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
