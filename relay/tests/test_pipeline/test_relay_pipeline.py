"""Tests for the relay pipeline wiring."""

from pathlib import Path
from unittest.mock import MagicMock

import httpx
import pytest
import respx

from relay.config.schema import RelayConfig
from relay.ingest.qweather_client import QWeatherClient, UpstreamError
from relay.models.weather import UpstreamSnapshot
from relay.pipeline.relay_pipeline import RelayPipeline, build_pipeline
from relay.reshape.reshaper import WeatherReshaper
from relay.storage.daily_cache import InMemoryCacheStore, JsonFileCacheStore
from relay.tests.helpers import fixed_clock


class TestRelayPipeline:
    def test_run(self, snapshot: UpstreamSnapshot):
        client = MagicMock(spec=QWeatherClient)
        client.fetch_snapshot.return_value = snapshot
        store = InMemoryCacheStore()
        pipeline = RelayPipeline(client, WeatherReshaper(store, clock=fixed_clock()))

        doc = pipeline.run()
        assert doc["ok"] is True
        assert len(doc["data"]["forecast"]["weather"]) == 3
        assert list(store.state) == ["2025-08-30"]

    def test_upstream_error_leaves_cache_untouched(self):
        client = MagicMock(spec=QWeatherClient)
        client.fetch_snapshot.side_effect = UpstreamError("HTTP 500", 500, "")
        store = InMemoryCacheStore({"2025-08-29": {"fxDate": "2025-08-29"}})
        pipeline = RelayPipeline(client, WeatherReshaper(store, clock=fixed_clock()))

        with pytest.raises(UpstreamError):
            pipeline.run()
        assert store.save_count == 0


class TestBuildPipeline:
    def test_wires_components(self, relay_config: RelayConfig):
        pipeline = build_pipeline(relay_config)
        assert isinstance(pipeline.client, QWeatherClient)
        assert isinstance(pipeline.reshaper.store, JsonFileCacheStore)
        assert pipeline.reshaper.store.path == Path(relay_config.cache.path)

    @respx.mock
    def test_end_to_end(self, relay_config: RelayConfig, qweather_now: dict, qweather_3d: dict):
        now_route = respx.get("https://test-qweather.example.com/v7/weather/now").mock(
            return_value=httpx.Response(200, json=qweather_now)
        )
        respx.get("https://test-qweather.example.com/v7/weather/3d").mock(
            return_value=httpx.Response(200, json=qweather_3d)
        )
        doc = build_pipeline(relay_config).run()

        assert doc["data"]["wendu"] == "25"
        assert now_route.calls[0].request.headers["authorization"].startswith("Bearer ey")
        cached = JsonFileCacheStore(relay_config.cache.path).load()
        assert list(cached) == ["2025-08-30"]
