import base64

from log_analytics_collector.client import LogAnalyticsClient
from log_analytics_collector.config import API_VERSION, Settings

SHARED_KEY = base64.b64encode(b"0123456789abcdef0123456789abcdef").decode()

def test_defaults(monkeypatch):
    monkeypatch.delenv("LOG_ANALYTICS_WORKSPACE_ID", raising=False)
    settings = Settings(_env_file=None)
    assert settings.api_version == API_VERSION
    assert settings.endpoint_domain == "ods.opinsights.azure.com"
    assert settings.request_timeout_s is None
    assert settings.time_generated_field is None

def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("LOG_ANALYTICS_WORKSPACE_ID", "ws-from-env")
    monkeypatch.setenv("LOG_ANALYTICS_SHARED_KEY", SHARED_KEY)
    monkeypatch.setenv("LOG_ANALYTICS_REQUEST_TIMEOUT_S", "12.5")
    settings = Settings(_env_file=None)
    assert settings.workspace_id == "ws-from-env"
    assert settings.shared_key.get_secret_value() == SHARED_KEY
    assert SHARED_KEY not in repr(settings)
    assert settings.request_timeout_s == 12.5

def test_client_from_settings():
    settings = Settings(_env_file=None, workspace_id="ws", shared_key=SHARED_KEY,
                        time_generated_field="EventTime", request_timeout_s=3)
    client = LogAnalyticsClient.from_settings(settings)
    assert client.workspace_id == "ws"
    assert client.url.startswith("https://ws.ods.opinsights.azure.com/api/logs")
    assert client.timeout == 3
    assert client.time_generated_field == "EventTime"
    client.close()

def test_env_file_is_read(tmp_path, monkeypatch):
    monkeypatch.delenv("LOG_ANALYTICS_WORKSPACE_ID", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text(f"LOG_ANALYTICS_WORKSPACE_ID=ws-file\nLOG_ANALYTICS_SHARED_KEY={SHARED_KEY}\n")
    settings = Settings(_env_file=env_file)
    assert settings.workspace_id == "ws-file"
