"""Shared test fixtures."""

from pathlib import Path

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from relay.config.schema import AuthConfig, RelayConfig, UpstreamConfig
from relay.models.weather import UpstreamSnapshot
from relay.tests.helpers import FIXTURE_DIR, load_fixture


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return FIXTURE_DIR


@pytest.fixture
def qweather_now() -> dict:
    return load_fixture("qweather_now.json")


@pytest.fixture
def qweather_3d() -> dict:
    return load_fixture("qweather_3d.json")


@pytest.fixture
def snapshot(qweather_now: dict, qweather_3d: dict) -> UpstreamSnapshot:
    """Snapshot as the client assembles it from the two fixture responses."""
    days = qweather_3d["daily"]
    return UpstreamSnapshot(
        city="朝阳区",
        update_time=qweather_now["updateTime"],
        now=qweather_now["now"],
        today=dict(days[0]),
        daily=days,
    )


@pytest.fixture
def private_key() -> Ed25519PrivateKey:
    return Ed25519PrivateKey.generate()


@pytest.fixture
def private_key_path(tmp_path: Path, private_key: Ed25519PrivateKey) -> Path:
    pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    path = tmp_path / "ed25519-private.pem"
    path.write_bytes(pem)
    return path


@pytest.fixture
def auth_config(private_key_path: Path) -> AuthConfig:
    return AuthConfig(kid="KID123", sub="PROJ456", private_key_path=str(private_key_path))


@pytest.fixture
def upstream_config() -> UpstreamConfig:
    return UpstreamConfig(
        api_host="test-qweather.example.com",
        location_id="101060110",
        max_retries=1,
        retry_base_delay=0.01,  # Fast retries in tests
    )


@pytest.fixture
def relay_config(
    tmp_path: Path, upstream_config: UpstreamConfig, auth_config: AuthConfig
) -> RelayConfig:
    return RelayConfig(
        upstream=upstream_config,
        auth=auth_config,
        cache={"path": str(tmp_path / "yesterday.json")},
    )
