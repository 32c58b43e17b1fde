from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MULTISIG_", env_file=".env", extra="ignore")

    APP_TITLE: str = "Multisig Note Signing API"
    API_PREFIX: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    # When enabled, submitted signatures are checked as ECDSA over the spend hash.
    VERIFY_SIGNATURES: bool = False

settings = Settings()
