"""
Log Analytics client.
Validates, signs and posts batches of records to a workspace's HTTP Data
Collector endpoint.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

import requests

from .config import API_VERSION, CONTENT_TYPE, ENDPOINT_DOMAIN, RESOURCE, Settings
from .exceptions import ConfigError, NullInputError, SubmissionFailedError
from .models import (
    validate_log_type,
    validate_record,
    validate_records,
    validate_time_generated_field,
)
from .serializer import to_payload
from .signing import build_signature, decode_shared_key, rfc1123_date

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SendResult:
    """Outcome of one POST to the Data Collector API."""
    status_code: int
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        """The response body on success, an empty string otherwise."""
        return self.body if self.ok else ""

    def raise_for_status(self) -> None:
        if not self.ok:
            raise SubmissionFailedError(self.status_code, self.body)


class LogAnalyticsClient:
    """Sends log records to one Log Analytics workspace."""

    def __init__(
        self,
        workspace_id: str,
        shared_key: str,
        *,
        api_version: str = API_VERSION,
        endpoint_domain: str = ENDPOINT_DOMAIN,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        time_generated_field: Optional[str] = None,
    ):
        if not workspace_id:
            raise ConfigError("workspace_id cannot be None or empty")
        if not shared_key:
            raise ConfigError("shared_key cannot be None or empty")
        decode_shared_key(shared_key)

        self.workspace_id = workspace_id
        self._shared_key = shared_key
        self.url = f"https://{workspace_id}.{endpoint_domain}{RESOURCE}?api-version={api_version}"
        self.timeout = timeout
        self.time_generated_field = time_generated_field

        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        log.info(f"Log Analytics client initialized for workspace '{workspace_id}'.")

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **kwargs: Any) -> "LogAnalyticsClient":
        """Builds a client from LOG_ANALYTICS_* environment settings."""
        if settings is None:
            settings = Settings()
        return cls(
            settings.workspace_id,
            settings.shared_key.get_secret_value(),
            api_version=settings.api_version,
            endpoint_domain=settings.endpoint_domain,
            timeout=settings.request_timeout_s,
            time_generated_field=settings.time_generated_field,
            **kwargs,
        )

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "LogAnalyticsClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(workspace_id={self.workspace_id!r})"

    def send_log_entry(self, record: Any, log_type: str, *, time_generated_field: Optional[str] = None) -> SendResult:
        """Sends a single record. See ``send_log_entries``."""
        if record is None:
            raise NullInputError("parameter 'record' cannot be None")
        validate_log_type(log_type)
        validate_record(record)
        return self.send_log_entries([record], log_type, time_generated_field=time_generated_field)

    def send_log_entries(
        self,
        records: Iterable[Any],
        log_type: str,
        *,
        time_generated_field: Optional[str] = None,
    ) -> SendResult:
        """
        Sends a batch of records in one signed POST.

        All validation happens before any network I/O. Transport errors
        (connection refused, DNS, timeouts) propagate as
        ``requests.exceptions.RequestException``.

        Returns:
            SendResult with the HTTP status and the raw response body.
        """
        if records is None:
            raise NullInputError("parameter 'records' cannot be None")
        validate_log_type(log_type)
        batch = validate_records(records)
        time_field = time_generated_field or self.time_generated_field
        if time_field:
            validate_time_generated_field(batch, time_field)

        body = to_payload(batch).encode("utf-8")
        date = rfc1123_date()
        headers = self._build_headers(log_type, date, len(body), time_field)

        log.info(f"Sending {len(batch)} record(s) of type '{log_type}' to workspace '{self.workspace_id}'.")
        log.debug(f"POST {self.url} ({len(body)} bytes)")
        response = self.session.post(self.url, data=body, headers=headers, timeout=self.timeout)

        result = SendResult(status_code=response.status_code, body=response.text)
        if result.ok:
            log.info(f"Log Analytics accepted {len(batch)} record(s) of type '{log_type}': {response.status_code}")
        else:
            log.warning(f"Log Analytics rejected {len(batch)} record(s) of type '{log_type}': "
                        f"{response.status_code} - {response.text}")
        return result

    async def asend_log_entry(self, record: Any, log_type: str, **kwargs: Any) -> SendResult:
        return await asyncio.to_thread(self.send_log_entry, record, log_type, **kwargs)

    async def asend_log_entries(self, records: Iterable[Any], log_type: str, **kwargs: Any) -> SendResult:
        return await asyncio.to_thread(self.send_log_entries, records, log_type, **kwargs)

    def _build_headers(self, log_type: str, date: str, content_length: int, time_field: Optional[str]) -> Dict[str, str]:
        # A fresh dict per request; session default headers are never touched.
        return {
            "Authorization": build_signature(self.workspace_id, self._shared_key, date, content_length),
            "Log-Type": log_type,
            "Accept": CONTENT_TYPE,
            "x-ms-date": date,
            "time-generated-field": time_field or "",
            "Content-Type": f"{CONTENT_TYPE}; charset=utf-8",
        }
