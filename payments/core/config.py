from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Read env from the process + optionally from a local .env file
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )

    LOG_LEVEL: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL", "log_level"))

    # iFirma (invoicing)
    IFIRMA_USERNAME: str = Field(default="", validation_alias=AliasChoices("IFIRMA_USERNAME", "ifirma_username"))
    IFIRMA_INVOICE_KEY: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("IFIRMA_INVOICE_KEY", "ifirma_invoice_key"),
    )
    IFIRMA_API_URL: str = Field(
        default="https://www.ifirma.pl/iapi",
        validation_alias=AliasChoices("IFIRMA_API_URL", "ifirma_api_url"),
    )
    IFIRMA_TIMEOUT: float = Field(default=30, validation_alias=AliasChoices("IFIRMA_TIMEOUT", "ifirma_timeout"))

    # Stripe (payments)
    STRIPE_SECRET_KEY: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("STRIPE_SECRET_KEY", "stripe_secret_key"),
    )
    STRIPE_WEBHOOK_SECRET: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("STRIPE_WEBHOOK_SECRET", "stripe_webhook_secret"),
    )
    STRIPE_API_BASE: str = Field(
        default="https://api.stripe.com/v1",
        validation_alias=AliasChoices("STRIPE_API_BASE", "stripe_api_base"),
    )
    STRIPE_TIMEOUT: float = Field(default=30, validation_alias=AliasChoices("STRIPE_TIMEOUT", "stripe_timeout"))
    # Maximum age (seconds) of a signed webhook before it is rejected
    STRIPE_WEBHOOK_TOLERANCE: int = Field(
        default=300,
        validation_alias=AliasChoices("STRIPE_WEBHOOK_TOLERANCE", "stripe_webhook_tolerance"),
    )


settings = Settings()
