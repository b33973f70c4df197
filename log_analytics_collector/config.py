from typing import Optional

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Data Collector API constants ---
API_VERSION = "2016-04-01"
ENDPOINT_DOMAIN = "ods.opinsights.azure.com"
RESOURCE = "/api/logs"
CONTENT_TYPE = "application/json"
MAX_LOG_TYPE_LENGTH = 100


class Settings(BaseSettings):
    # --- Workspace credentials ---
    workspace_id: str = ""
    shared_key: SecretStr = SecretStr("")  # Primary or secondary key, base64

    # --- Endpoint ---
    api_version: str = API_VERSION
    endpoint_domain: str = ENDPOINT_DOMAIN
    request_timeout_s: Optional[float] = None  # None leaves the transport default in place

    # --- Records ---
    time_generated_field: Optional[str] = None  # Record field to use as TimeGenerated

    model_config = SettingsConfigDict(
        env_prefix="LOG_ANALYTICS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra='ignore'
    )
