"""Transport to the remote hierarchy service."""

import logging
import ssl
from typing import Protocol

import requests
from requests.adapters import HTTPAdapter

from hierval.config import ServiceConfig, TlsVersion
from hierval.constants import DRYSYNC_ROUTE
from hierval.errors import ServiceError

logger = logging.getLogger(__name__)

_TLS_VERSIONS = {
    TlsVersion.TLS1_2: ssl.TLSVersion.TLSv1_2,
    TlsVersion.TLS1_3: ssl.TLSVersion.TLSv1_3,
}


class LearnServiceAccessor(Protocol):
    """What the pipeline needs from the hierarchy service client."""

    def hierarchy_drysync(self, body: str) -> str:
        """Send a serialized DrySyncMessage and return the raw JSON response body."""
        ...


class TlsFloorAdapter(HTTPAdapter):
    """HTTPAdapter that refuses TLS versions below the configured minimum."""

    def __init__(self, min_version: ssl.TLSVersion, **kwargs):
        self.min_version = min_version
        super().__init__(**kwargs)

    def init_poolmanager(self, *args, **kwargs):
        context = ssl.create_default_context()
        context.minimum_version = self.min_version
        kwargs["ssl_context"] = context
        return super().init_poolmanager(*args, **kwargs)


class HttpLearnServiceAccessor:
    """requests-based accessor for the hierarchy service.

    The TLS floor and timeout come from ServiceConfig; nothing is configured
    process-wide.
    """

    def __init__(self, service_config: ServiceConfig, session: requests.Session | None = None):
        self.config = service_config
        self.session = session or requests.Session()
        self.session.mount("https://", TlsFloorAdapter(_TLS_VERSIONS[service_config.min_tls_version]))

        self.session.headers.update({"Content-Type": "application/json"})
        if service_config.api_key:
            self.session.headers["X-Api-Key"] = service_config.api_key

    @property
    def drysync_url(self) -> str:
        return f"{self.config.endpoint}/{DRYSYNC_ROUTE}"

    def hierarchy_drysync(self, body: str) -> str:
        """POST the dry-sync body; one attempt, no retry.

        Raises:
            ServiceError: On a non-2xx response
            requests.RequestException: On transport failures and timeouts
        """
        logger.debug(f"POST {self.drysync_url} ({len(body)} bytes)")
        response = self.session.post(
            self.drysync_url,
            data=body.encode("utf-8"),
            timeout=self.config.timeout_seconds,
        )

        if not response.ok:
            raise ServiceError(
                f"Dry-sync returned HTTP {response.status_code}: {response.text[:500]}",
                status_code=response.status_code,
            )
        return response.text
