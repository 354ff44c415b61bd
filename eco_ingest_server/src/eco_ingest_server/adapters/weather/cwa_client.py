import logging
from typing import Any, Optional
from urllib.parse import quote

import requests
from eco_ingest_core.domain.models import WeatherResult

log = logging.getLogger(__name__)


class CwaWeatherClient:
    """Weather-by-coordinate lookup against the CWA proxy service.

    ``fetch`` never raises: any failure comes back as an unsuccessful
    ``WeatherResult`` carrying the reason.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 5.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def url_for(self, lat: Any, long: Any) -> str:
        return f"{self.base_url}/{quote(str(lat), safe='')}/{quote(str(long), safe='')}"

    def fetch(self, lat: Any, long: Any) -> WeatherResult:
        if lat is None or long is None:
            return WeatherResult.failed("missing coordinates")

        url = self.url_for(lat, long)
        try:
            resp = self._session.get(url, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as exc:
            log.warning("Weather lookup %s failed: %s", url, exc)
            return WeatherResult.failed(str(exc))

        if not isinstance(data, dict):
            log.warning("Weather lookup %s returned %s", url, type(data).__name__)
            return WeatherResult.failed("unexpected response shape")

        log.debug("Weather for %s,%s: %s", lat, long, data.get("weather"))
        return WeatherResult(success=True, data=data, msg="")
