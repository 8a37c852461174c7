"""NDBC realtime feed client. One request per cycle, no retries."""

import logging

import httpx

logger = logging.getLogger(__name__)

NDBC_BASE_URL = "https://www.ndbc.noaa.gov"
DEFAULT_USER_AGENT = "buoybot/0.1.0"


class NdbcClient:
    def __init__(
        self,
        base_url: str = NDBC_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 30.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout

    def realtime_url(self, station_id: str) -> str:
        return f"{self.base_url}/data/realtime2/{station_id}.txt"

    def get_realtime(self, station_id: str) -> bytes:
        """Fetch the full realtime2 text feed for a station.

        Raises httpx.HTTPStatusError on a non-2xx response and
        httpx.RequestError on transport failures; the caller ends the cycle.
        """
        url = self.realtime_url(station_id)
        resp = httpx.get(
            url,
            headers={"User-Agent": self.user_agent, "Accept": "text/plain"},
            timeout=self.timeout,
        )
        logger.info("NDBC %s -> %d (%d bytes)", url, resp.status_code, len(resp.content))
        resp.raise_for_status()
        return resp.content
