import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from services.cache import FingerprintCache
from services.layer_controller import LayerController
from services.maritime import MaritimeService
from services.measurement import MeasurementTool
from services.request_queue import RequestQueue
from shared.config import Settings, settings as default_settings
from state.storage import JsonFileStorage
from state.store import MapStore

logger = logging.getLogger("api")


def create_app(
    store: Optional[MapStore] = None,
    service: Optional[MaritimeService] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the SeaChart API with its own store, cache, queue and service.

    Tests pass their own store/service; the defaults read the persisted
    settings file and talk to the configured upstream services.
    """
    settings = settings or default_settings

    if store is None:
        store = MapStore(JsonFileStorage(settings.SETTINGS_PATH))
        store.load_settings()

    if service is None:
        service = MaritimeService(
            settings,
            cache=FingerprintCache(ttl_seconds=settings.CACHE_TTL_SECONDS),
            queue=RequestQueue(rate_limit=settings.API_RATE_LIMIT),
        )

    app = FastAPI(title="SeaChart Maritime Engine API")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.store = store
    app.state.service = service
    app.state.layers = LayerController(store, service)
    app.state.measurement = MeasurementTool(store)

    from api.layers import router as layers_router
    app.include_router(layers_router)

    from api.measure import router as measure_router
    app.include_router(measure_router)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "version": "1.0"}

    logger.info(f"SeaChart API ready (proxy: {settings.PROXY_SERVER_URL})")
    return app
