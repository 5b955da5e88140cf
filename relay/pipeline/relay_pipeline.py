"""Relay pipeline: one fetch → reshape cycle."""

import logging
import time
from typing import Any

from relay.config.schema import RelayConfig
from relay.ingest.auth_token import token_provider
from relay.ingest.qweather_client import QWeatherClient
from relay.reshape.reshaper import WeatherReshaper
from relay.storage.daily_cache import JsonFileCacheStore

logger = logging.getLogger(__name__)


class RelayPipeline:
    def __init__(self, client: QWeatherClient, reshaper: WeatherReshaper):
        self.client = client
        self.reshaper = reshaper

    def run(self) -> dict[str, Any]:
        """Fetch a snapshot and reshape it. Upstream and persistence errors propagate."""
        start_time = time.monotonic()
        logger.info("Relay cycle starting")
        snapshot = self.client.fetch_snapshot()
        document = self.reshaper.reshape(snapshot)
        logger.info(
            "Relay cycle done in %.2fs (%d forecast days)",
            time.monotonic() - start_time,
            len(document["data"]["forecast"]["weather"]),
        )
        return document


def build_pipeline(config: RelayConfig) -> RelayPipeline:
    client = QWeatherClient(config.upstream, token_provider(config.auth))
    reshaper = WeatherReshaper(JsonFileCacheStore(config.cache.path))
    return RelayPipeline(client, reshaper)
