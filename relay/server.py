"""Weather relay HTTP server: FastAPI app serving the reshaped document."""

import logging
import threading
from collections.abc import Callable

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from relay.config.defaults import DEFAULT_CONFIG_PATH
from relay.config.loader import load_config
from relay.models.common import utc_now_iso
from relay.pipeline.relay_pipeline import RelayPipeline, build_pipeline

logger = logging.getLogger(__name__)

ERROR_BODY = {"error": "Internal Server Error"}


def create_app(pipeline_factory: Callable[[], RelayPipeline]) -> FastAPI:
    """Build the app. The pipeline is created on first request and reused,
    so its reshaper lock serialises cache access across requests."""
    app = FastAPI(title="Weather Relay", version="0.1.0")
    holder: dict[str, RelayPipeline] = {}
    holder_lock = threading.Lock()

    def _pipeline() -> RelayPipeline:
        with holder_lock:
            if "pipeline" not in holder:
                holder["pipeline"] = pipeline_factory()
            return holder["pipeline"]

    @app.get("/")
    @app.get("/weather")
    def get_weather():
        """Current conditions, yesterday and forecast in the display schema."""
        try:
            return _pipeline().run()
        except Exception:
            logger.exception("Relay cycle failed")
            return JSONResponse(status_code=500, content=ERROR_BODY)

    @app.get("/api/health")
    def get_health():
        return {"status": "ok", "timestamp": utc_now_iso()}

    return app


def _default_pipeline() -> RelayPipeline:
    return build_pipeline(load_config(DEFAULT_CONFIG_PATH))


app = create_app(_default_pipeline)
