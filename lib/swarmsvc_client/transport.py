from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from .errors import ApiError, AuthError, NetworkError
from .config_types import ClientConfig

logger = logging.getLogger(__name__)


class Transport:
    """JSON transport to the Docker Engine API over its unix socket."""

    def __init__(self, cfg: ClientConfig, *, transport: httpx.BaseTransport | None = None):
        self._cfg = cfg
        headers = {"User-Agent": f"swarmsvc-client/{cfg.client_version or '0.1.0'}"}
        self._client = httpx.Client(
            base_url="http://docker",
            timeout=cfg.timeout_s,
            headers=headers,
            transport=transport or httpx.HTTPTransport(uds=cfg.docker_socket),
        )

    def close(self) -> None:
        self._client.close()

    def request(
            self,
            method: str,
            path: str,
            *,
            params: dict[str, Any] | None = None,
            json_body: Any | None = None,
    ) -> Any:
        logger.debug("%s %s", method, path)
        try:
            r = self._client.request(method, path, params=params, json=json_body)
        except httpx.RequestError as e:
            raise NetworkError(str(e)) from e

        data: Any = None
        text = None
        try:
            data = r.json()
        except Exception:
            text = r.text

        if r.status_code >= 400:
            msg = f"{method} {path} failed with {r.status_code}"
            details = None

            # the engine reports failures as {"message": "..."}
            if isinstance(data, dict) and "message" in data:
                details = json.dumps(data, ensure_ascii=False)
                msg = str(data.get("message") or msg)
            elif text:
                details = text[:1000]

            if r.status_code in (401, 403):
                raise AuthError(r.status_code, msg, details)
            raise ApiError(r.status_code, msg, details)

        return data if data is not None else r.text
