"""QWeather API client: current conditions and the N-day forecast."""

import logging
import time
from collections.abc import Callable

import httpx

from relay.config.schema import UpstreamConfig
from relay.models.weather import UpstreamSnapshot

logger = logging.getLogger(__name__)

SUCCESS_CODE = "200"
RETRY_STATUSES = (429, 500, 502, 503, 504)


class UpstreamError(Exception):
    """Raised when a QWeather request fails or returns an error code."""

    def __init__(self, message: str, status: int | str | None = None, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body


class QWeatherClient:
    def __init__(
        self,
        config: UpstreamConfig,
        token_provider: Callable[[], str],
        base_url: str | None = None,
    ):
        self.config = config
        self.token_provider = token_provider
        self.base_url = base_url or f"https://{config.api_host}"

    def get_now(self) -> dict:
        """Fetch real-time conditions (``/v7/weather/now``)."""
        return self._get("/v7/weather/now")

    def get_forecast(self) -> dict:
        """Fetch the daily forecast (``/v7/weather/{N}d``)."""
        return self._get(f"/v7/weather/{self.config.forecast_days}d")

    def fetch_snapshot(self) -> UpstreamSnapshot:
        now_data = self.get_now()
        forecast_data = self.get_forecast()

        raw_daily = forecast_data.get("daily")
        if not isinstance(raw_daily, list):
            raw_daily = []
        daily = [d for d in raw_daily if isinstance(d, dict)]
        now = now_data.get("now")
        return UpstreamSnapshot(
            city=self.config.city,
            update_time=now_data.get("updateTime") or "",
            now=now if isinstance(now, dict) else {},
            today=dict(daily[0]) if daily else None,
            daily=daily,
        )

    def _get(self, path: str) -> dict:
        """GET with bearer auth, retrying transport errors and 429/5xx.

        Raises UpstreamError on a non-2xx status, a transport failure after
        retries, or a JSON body whose ``code`` is not "200".
        """
        url = f"{self.base_url}{path}"
        params = {"location": self.config.location_id}
        max_retries = self.config.max_retries

        for attempt in range(max_retries + 1):
            headers = {"Authorization": f"Bearer {self.token_provider()}"}
            try:
                resp = httpx.get(
                    url, params=params, headers=headers, timeout=self.config.timeout_seconds
                )
            except httpx.RequestError as e:
                if attempt < max_retries:
                    delay = self._delay(attempt)
                    logger.warning("QWeather request error, retrying in %.1fs: %s", delay, e)
                    time.sleep(delay)
                    continue
                logger.error("QWeather request to %s failed: %s", path, e)
                raise UpstreamError(f"Request to {path} failed: {e}") from e

            if resp.status_code in RETRY_STATUSES and attempt < max_retries:
                delay = self._delay(attempt)
                logger.warning(
                    "QWeather %s returned %d, retrying in %.1fs (attempt %d/%d)",
                    path, resp.status_code, delay, attempt + 1, max_retries,
                )
                time.sleep(delay)
                continue
            return self._parse(path, resp)

        raise AssertionError("unreachable")

    def _parse(self, path: str, resp: httpx.Response) -> dict:
        if not resp.is_success:
            logger.error("QWeather %s HTTP %d: %s", path, resp.status_code, resp.text)
            raise UpstreamError(
                f"HTTP {resp.status_code} from {path}", resp.status_code, resp.text
            )
        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamError(
                f"Invalid JSON from {path}", resp.status_code, resp.text
            ) from e
        code = data.get("code") if isinstance(data, dict) else None
        if code != SUCCESS_CODE:
            logger.error("QWeather %s returned code %s", path, code)
            raise UpstreamError(f"QWeather API error {code} from {path}", code, resp.text)
        return data

    def _delay(self, attempt: int) -> float:
        return self.config.retry_base_delay * (2**attempt)
