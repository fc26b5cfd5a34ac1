import re
import httpx
import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlencode

logger = logging.getLogger(__name__)

PRICE_PATH = re.compile(r"^/prices/([^/]+)$")
PRODUCT_PATH = re.compile(r"^/products/([^/]+)$")


def build_catalog_url(base_url: str, path: str, query: List[Tuple[str, str]]) -> Optional[str]:
    """
    Maps a proxied GET onto the Paddle catalogue API:
      /prices/:id, /products/:id, /prices?<query>, or legacy ?price_id= / ?product_id=.
    Returns None when nothing matches.
    """
    path = "/" + path.strip("/") if path.strip("/") else ""
    params = dict(query)
    include = params.get("include")
    suffix = f"?{urlencode({'include': include})}" if include else ""

    match = PRICE_PATH.match(path)
    if match:
        return f"{base_url}/prices/{match.group(1)}{suffix}"

    match = PRODUCT_PATH.match(path)
    if match:
        return f"{base_url}/products/{match.group(1)}{suffix}"

    if path == "/prices":
        qs = urlencode(query)
        return f"{base_url}/prices{'?' + qs if qs else ''}"

    if params.get("price_id"):
        return f"{base_url}/prices/{params['price_id']}{suffix}"
    if params.get("product_id"):
        return f"{base_url}/products/{params['product_id']}{suffix}"

    return None


class PaddleClient:
    """Thin bearer-token client for the Paddle REST API."""

    def __init__(self, api_token: str, timeout: float = 10.0):
        self.api_token = api_token
        self.timeout = timeout

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_token}",
            "Content-Type": "application/json",
        }

    def get(self, url: str) -> httpx.Response:
        with httpx.Client(timeout=self.timeout) as client:
            return client.get(url, headers=self.headers)

    def create_transaction(self, base_url: str, body: Dict[str, Any]) -> httpx.Response:
        with httpx.Client(timeout=self.timeout) as client:
            return client.post(f"{base_url}/transactions", headers=self.headers, json=body)
