from pydantic_settings import BaseSettings, SettingsConfigDict

from hoa_client_sdk.config import ClientConfig


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "HOA-VIOLATIONS-FUNCTIONS"
    ENV: str = "dev"
    SUPABASE_URL: str = "http://localhost:54321"
    SUPABASE_SERVICE_ROLE_KEY: str = "change-me"
    SUPABASE_JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: str = "authenticated"
    REQUEST_TIMEOUT_SECONDS: float = 30.0
    STEP_TIMEOUT_SECONDS: float = 5.0
    REQUIRE_CALLER_PERMISSION: bool = True

    def service_client_config(self) -> ClientConfig:
        """SDK config whose API key is the service-role key."""
        return ClientConfig(
            env_name=self.ENV,
            supabase_url=self.SUPABASE_URL.rstrip("/"),
            anon_key=self.SUPABASE_SERVICE_ROLE_KEY,
            http_timeout_seconds=self.REQUEST_TIMEOUT_SECONDS,
            step_timeout_seconds=self.STEP_TIMEOUT_SECONDS,
        )


settings = Settings()
