"""Default config path and the environment variables that override config values."""

ENV_OVERRIDES: dict[str, str] = {
    "QWEATHER_API_HOST": "upstream.api_host",
    "QWEATHER_LOCATION_ID": "upstream.location_id",
    "QWEATHER_JWT_KID": "auth.kid",
    "QWEATHER_JWT_SUB": "auth.sub",
    "QWEATHER_JWT_PRIVATE_KEY_PATH": "auth.private_key_path",
    "RELAY_CACHE_PATH": "cache.path",
    "RELAY_PORT": "server.port",
    "RELAY_LOG_LEVEL": "log_level",
}

DEFAULT_CONFIG_PATH = "ops/configs/default.yaml"
