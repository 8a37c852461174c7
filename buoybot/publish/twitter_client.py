"""X/Twitter API v2 client for posting reports."""

import logging

import httpx

logger = logging.getLogger(__name__)

TWITTER_API_BASE = "https://api.twitter.com"


class TwitterClientError(Exception):
    """Raised when the API rejects a request or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class TwitterClient:
    """Thin wrapper around the v2 ``POST /2/tweets`` endpoint.

    Authenticates with an OAuth 2.0 user-context bearer token.
    """

    def __init__(
        self,
        bearer_token: str,
        base_url: str = TWITTER_API_BASE,
        timeout: float = 30.0,
    ):
        if not bearer_token:
            raise TwitterClientError("Bearer token is empty")
        self.bearer_token = bearer_token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.bearer_token}",
            "Content-Type": "application/json",
        }

    def _request(self, method: str, endpoint: str, data: dict | None = None) -> dict:
        url = f"{self.base_url}{endpoint}"
        try:
            resp = httpx.request(
                method, url, headers=self._headers(), json=data, timeout=self.timeout
            )
        except httpx.RequestError as e:
            logger.error("Twitter API request failed: %s %s -> %s", method, endpoint, e)
            raise TwitterClientError(f"Request failed: {e}") from e

        if resp.status_code >= 400:
            body = resp.text
            logger.error(
                "Twitter API %d: %s %s -> %s", resp.status_code, method, endpoint, body
            )
            raise TwitterClientError(f"HTTP {resp.status_code}: {body}", resp.status_code)
        return resp.json()

    def post(self, text: str) -> str:
        """Post a status. Returns the new post id."""
        result = self._request("POST", "/2/tweets", {"text": text})
        post_id = result.get("data", {}).get("id")
        if not post_id:
            raise TwitterClientError(f"No post id in response: {result}")
        return post_id
