from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    mailjet_api_key: str | None = None
    mailjet_secret_key: str | None = None
    mailjet_api_url: str = "https://api.mailjet.com/v3.1/send"
    mailjet_from_email: str = "internships@moondev.example"
    mailjet_from_name: str = "MoonDev Internships"

    brand_name: str = "MoonDev"
    program_year: int = 2026

    send_max_attempts: int = 3
    send_backoff_seconds: float = 0.5
    request_timeout_seconds: float = 30.0

    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    @property
    def mail_configured(self) -> bool:
        return bool(self.mailjet_api_key and self.mailjet_secret_key)

settings = Settings()
