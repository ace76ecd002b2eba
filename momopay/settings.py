# settings.py
from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    # -----------------------
    # MTN MOMO
    # -----------------------
    # X-Target-Environment value: "sandbox" or a live country code such as "mtncameroon"
    MOMO_TARGET_ENVIRONMENT: str = "sandbox"
    MOMO_API_VERSION: str = "v1_0"

    MOMO_API_USER: str = ""
    MOMO_API_KEY: str = ""

    MOMO_COLLECTION_SUBSCRIPTION_KEY: str = ""
    MOMO_DISBURSEMENT_SUBSCRIPTION_KEY: str = ""

    # Sent as X-Callback-Url on request-to-pay / transfer when set
    MOMO_CALLBACK_URL: str = ""
    # providerCallbackHost used when provisioning sandbox users
    MOMO_CALLBACK_HOST: str = ""

    # -----------------------
    # HTTP
    # -----------------------
    MOMO_HTTP_TIMEOUT_S: float = 20.0
    MOMO_HTTP_DEBUG: bool = False


settings = Settings()
