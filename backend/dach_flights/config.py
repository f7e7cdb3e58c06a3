from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]

class Settings(BaseSettings):
    AMADEUS_CLIENT_ID: str = ""
    AMADEUS_CLIENT_SECRET: str = ""
    AMADEUS_ENV: str = "test"  # "test" or "production"

    # CORS: comma separated list and/or a single origin
    ALLOWED_ORIGINS: str = ""
    ALLOWED_ORIGIN: str = ""

    ENV: str = "development"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def amadeus_base_url(self) -> str:
        if self.AMADEUS_ENV == "production":
            return "https://api.amadeus.com"
        return "https://test.api.amadeus.com"

    @property
    def token_url(self) -> str:
        return self.amadeus_base_url + "/v1/security/oauth2/token"

    @property
    def offers_url(self) -> str:
        return self.amadeus_base_url + "/v2/shopping/flight-offers"

    @property
    def allowed_origins(self) -> list[str]:
        """Configured origins plus the local dev origins, de-duplicated in order."""
        multi = [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]
        single = self.ALLOWED_ORIGIN.strip()
        candidates = multi + ([single] if single else []) + DEV_ORIGINS
        return list(dict.fromkeys(candidates))

settings = Settings()
