"""HTTP transport for the node REST API."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import requests

from ..constants import ContentType
from ..exceptions import DecodingError, NetworkError, ValidationError
from ..utils import drop_none
from .config import NodeClientConfig

logger = logging.getLogger(__name__)


class NodeTransport:
    """Issue requests against a node and turn failures into ``NetworkError``."""

    def __init__(self, config: NodeClientConfig, session: requests.Session | None = None) -> None:
        if session is not None and not isinstance(session, requests.Session):
            raise ValidationError(
                "session must be a requests.Session",
                field="session",
                value=type(session).__name__,
            )
        self._base_url = config.resolved_node_url()
        self._session = session or requests.Session()
        self._timeout = config.request_timeout
        self._headers: dict[str, str] = dict(config.headers)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def session(self) -> requests.Session:
        return self._session

    def set_timeout(self, timeout: float) -> None:
        if timeout <= 0:
            raise ValidationError("Timeout must be positive", field="timeout", value=timeout)
        self._timeout = timeout

    def set_header(self, key: str, value: str) -> None:
        self._headers[key] = value

    def remove_header(self, key: str) -> None:
        self._headers.pop(key, None)

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------
    def get_json(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        response = self._request("GET", path, params=params)
        return self._decode(response, path)

    def get_bcs(self, path: str, params: Mapping[str, Any] | None = None) -> bytes:
        """GET ``path`` asking the node for a raw BCS body instead of JSON."""

        response = self._request(
            "GET", path, params=params, headers={"Accept": ContentType.BCS.value}
        )
        return response.content

    def post_json(
        self,
        path: str,
        body: Any,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        response = self._request(
            "POST",
            path,
            params=params,
            json=body,
            headers={"Content-Type": ContentType.JSON.value},
        )
        return self._decode(response, path)

    def post_bcs(
        self,
        path: str,
        body: bytes,
        content_type: ContentType,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        response = self._request(
            "POST",
            path,
            params=params,
            data=body,
            headers={"Content-Type": content_type.value},
        )
        return self._decode(response, path)

    def request_url(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """Send a request to an absolute URL outside the node, e.g. a faucet or indexer.

        Headers set for the node are not sent along.
        """

        return self._send(method, url, url, node_headers=False, **kwargs)

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        **kwargs: Any,
    ) -> requests.Response:
        endpoint = path.lstrip("/")
        url = f"{self._base_url}/{endpoint}" if endpoint else f"{self._base_url}/"
        return self._send(method, url, f"/{endpoint}", params=params, headers=headers, **kwargs)

    def _send(
        self,
        method: str,
        url: str,
        endpoint: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        node_headers: bool = True,
        **kwargs: Any,
    ) -> requests.Response:
        merged_headers = {**(self._headers if node_headers else {}), **(headers or {})}
        logger.debug("%s %s params=%s", method, endpoint, drop_none(params))

        try:
            response = self._session.request(
                method,
                url,
                params=drop_none(params),
                headers=merged_headers,
                timeout=self._timeout,
                **kwargs,
            )
        except requests.RequestException as exc:
            raise NetworkError(
                f"{method} {endpoint} failed: {exc}",
                endpoint=endpoint,
                details={"error": str(exc)},
            ) from exc

        if response.status_code >= 400:
            raise NetworkError(
                f"{method} {endpoint} returned HTTP {response.status_code}",
                endpoint=endpoint,
                status_code=response.status_code,
                body=response.text,
            )
        return response

    @staticmethod
    def _decode(response: requests.Response, path: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise DecodingError(
                f"Response from {path} is not valid JSON",
                field=path,
                details={"body": response.text[:512]},
            ) from exc
