"""CLI entry point for the weather relay."""

import argparse
import json
import logging
from pathlib import Path

from relay.config.defaults import DEFAULT_CONFIG_PATH
from relay.config.loader import get_config_value, load_config
from relay.ingest.auth_token import TokenError, generate_token
from relay.ingest.qweather_client import UpstreamError
from relay.models.weather import UpstreamSnapshot
from relay.pipeline.relay_pipeline import build_pipeline
from relay.reshape.reshaper import WeatherReshaper
from relay.storage.daily_cache import JsonFileCacheStore, PersistenceError


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="relay",
        description="Weather relay: QWeather → display client schema",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG_PATH, help="Config YAML path (optional)"
    )

    sub = parser.add_subparsers(dest="command")

    # serve
    serve_p = sub.add_parser("serve", help="Run the HTTP server")
    serve_p.add_argument("--host", default=None, help="Bind address")
    serve_p.add_argument("--port", type=int, default=None, help="Bind port")

    # fetch
    fetch_p = sub.add_parser("fetch", help="Run one relay cycle and print the result")
    fetch_p.add_argument(
        "--raw", action="store_true", help="Print the upstream snapshot instead"
    )

    # reshape
    reshape_p = sub.add_parser("reshape", help="Reshape a saved snapshot JSON file")
    reshape_p.add_argument("snapshot", help="Path to snapshot JSON")

    # token
    sub.add_parser("token", help="Print a freshly signed API token")

    # cache show / cache clear
    cache_p = sub.add_parser("cache", help="Cache operations")
    cache_sub = cache_p.add_subparsers(dest="cache_command")
    cache_sub.add_parser("show", help="Display cached daily records")
    cache_sub.add_parser("clear", help="Empty the cache")

    # config show / config get
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display effective config")
    get_p = config_sub.add_parser("get", help="Display one config value")
    get_p.add_argument("key", help="Dotted key, e.g. upstream.location_id")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    try:
        config = load_config(args.config)
    except ValueError as e:
        print(f"Error: invalid config: {e}")
        return 1

    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        return _cmd_serve(config, args)
    elif args.command == "fetch":
        return _cmd_fetch(config, args)
    elif args.command == "reshape":
        return _cmd_reshape(config, args)
    elif args.command == "token":
        return _cmd_token(config)
    elif args.command == "cache":
        return _cmd_cache(config, args)
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _cmd_serve(config, args) -> int:
    import uvicorn

    from relay.server import create_app

    app = create_app(lambda: build_pipeline(config))
    uvicorn.run(
        app,
        host=args.host or config.server.host,
        port=args.port or config.server.port,
        log_level=config.log_level.lower(),
    )
    return 0


def _cmd_fetch(config, args) -> int:
    pipeline = build_pipeline(config)
    try:
        if args.raw:
            _print_json(pipeline.client.fetch_snapshot().to_dict())
        else:
            _print_json(pipeline.run())
    except (UpstreamError, TokenError, PersistenceError) as e:
        print(f"Error: {e}")
        return 1
    return 0


def _cmd_reshape(config, args) -> int:
    try:
        raw = json.loads(Path(args.snapshot).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        print(f"Error: cannot read snapshot {args.snapshot}: {e}")
        return 1
    reshaper = WeatherReshaper(JsonFileCacheStore(config.cache.path))
    try:
        _print_json(reshaper.reshape(UpstreamSnapshot.from_dict(raw)))
    except PersistenceError as e:
        print(f"Error: {e}")
        return 1
    return 0


def _cmd_token(config) -> int:
    try:
        print(generate_token(config.auth))
    except TokenError as e:
        print(f"Error: {e}")
        return 1
    return 0


def _cmd_cache(config, args) -> int:
    store = JsonFileCacheStore(config.cache.path)
    if args.cache_command == "show":
        state = store.load()
        if not state:
            print(f"Cache empty ({store.path})")
            return 0
        for key in sorted(state):
            print(f"{key}: {json.dumps(state[key], ensure_ascii=False)}")
        return 0
    elif args.cache_command == "clear":
        try:
            store.clear()
        except PersistenceError as e:
            print(f"Error: {e}")
            return 1
        print(f"Cache cleared ({store.path})")
        return 0
    else:
        print("Use: cache show | cache clear")
        return 1


def _cmd_config(config, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    elif args.config_command == "get":
        try:
            value = get_config_value(config, args.key)
        except KeyError:
            print(f"Unknown config key: {args.key}")
            return 1
        print(value)
        return 0
    else:
        print("Use: config show | config get KEY")
        return 1
