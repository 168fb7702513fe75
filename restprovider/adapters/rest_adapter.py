# restprovider/adapters/rest_adapter.py
import asyncio
import json
import logging
from typing import Any, Awaitable, Dict, Protocol

import requests

from ..exceptions import TransportError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "timeout": 30,
    "verify": True,
    "headers": {
        "Content-Type": "application/json",
        "Accept": "application/json",
    },
}


class Transport(Protocol):
    """Anything that can turn (url, options) into {"headers": ..., "data": ...}"""
    def __call__(self, url: str, options: Dict[str, Any]) -> Awaitable[Dict[str, Any]]:
        ...


class RESTAdapter:
    """
    HTTP transport backed by a requests.Session.
    Requests run in a worker thread so several can be in flight at once.
    """
    def __init__(self, config: Dict = None):
        self.config = {**DEFAULT_CONFIG, **(config or {})}

        self.session = requests.Session()
        # Extra headers add to the JSON defaults rather than replacing them
        self.session.headers.update({**DEFAULT_CONFIG["headers"], **self.config["headers"]})
        self.session.verify = self.config["verify"]

    async def __call__(self, url: str, options: Dict[str, Any] = None) -> Dict[str, Any]:
        return await asyncio.to_thread(self.request, url, options or {})

    def request(self, url: str, options: Dict[str, Any]) -> Dict[str, Any]:
        method = options.get("method", "GET")
        kwargs = {"timeout": self.config["timeout"]}
        if "data" in options:
            body = options["data"]
            # Pre-encoded bodies go out untouched, everything else is serialized here
            kwargs["data"] = body if isinstance(body, (str, bytes)) else json.dumps(body)

        try:
            resp = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}", url=url) from e

        if not resp.ok:
            logger.warning("%s %s returned %s", method, url, resp.status_code)
            raise TransportError(
                f"{method} {url} failed: {resp.status_code} - {resp.text}",
                status_code=resp.status_code,
                url=url,
                body=resp.text,
            )

        return {
            "headers": {key.lower(): value for key, value in resp.headers.items()},
            "data": self._parse_body(resp),
        }

    @staticmethod
    def _parse_body(resp: requests.Response) -> Any:
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            return resp.text

    def close(self):
        self.session.close()
