"""
FastAPI application entry point for the Polaris runtime.

Responsibilities:
- create the FastAPI app
- construct shared singletons (SessionStore, DirectionsClient, RouteSynchronizer, RouteAgent)
- on startup, race the client's reported location against the geolocation timeout
- on shutdown, stop the map (rotation first) and close the HTTP client
- include session routes under /sessions and map routes under /map

Run with:

    uvicorn runtime.api.server:app --reload
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional, Tuple

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from configs.settings import settings
from core.api.directions_client import DirectionsClient
from exceptions.exceptions import UnknownSessionError
from runtime.agents.route_agent import RouteAgent
from runtime.map.renderer import GeoJSONRenderer
from runtime.map.route_synchronizer import RouteSynchronizer
from runtime.store.session_store import SessionStore
from . import map_routes, session_routes


logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def _log_locate_failure(task: asyncio.Task) -> None:
    """Done-callback for the startup location race: surface crashes in the log."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("[SERVER] Map startup failed: %s", exc, exc_info=exc)


class ClientLocation:
    """Position reported by the browser through POST /map/location.

    `wait()` is the locate callable raced by the synchronizer. A report
    that lands before anyone waits is kept; one that lands after the wait
    was abandoned (timeout) is refused.
    """

    def __init__(self) -> None:
        self._position: Optional[Tuple[float, float]] = None
        self._future: Optional[asyncio.Future] = None
        self._closed = False

    async def wait(self) -> Tuple[float, float]:
        if self._position is not None:
            return self._position
        self._future = asyncio.get_running_loop().create_future()
        try:
            return await self._future
        finally:
            self._closed = True

    def report(self, position: Tuple[float, float]) -> bool:
        if self._closed:
            return False
        if self._future is None:
            if self._position is not None:
                return False
            self._position = position
            return True
        if self._future.done():
            return False
        self._future.set_result(position)
        return True


def create_app(
    session_store: Optional[SessionStore] = None,
    directions_client: Optional[DirectionsClient] = None,
    synchronizer: Optional[RouteSynchronizer] = None,
    client_location: Optional[ClientLocation] = None,
) -> FastAPI:
    """Build the app. Every collaborator can be injected (tests do)."""

    # Session storage: in-memory only, gone on restart.
    session_store = session_store or SessionStore()
    session_store.ensure_session()

    directions_client = directions_client or DirectionsClient()
    synchronizer = synchronizer or RouteSynchronizer(GeoJSONRenderer())
    client_location = client_location or ClientLocation()

    route_agent = RouteAgent(
        session_store=session_store,
        directions_client=directions_client,
        synchronizer=synchronizer,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        locate_task = asyncio.create_task(synchronizer.resolve_location(client_location.wait))
        locate_task.add_done_callback(_log_locate_failure)
        try:
            yield
        finally:
            locate_task.cancel()
            synchronizer.dispose()
            await directions_client.aclose()
            logger.info("[SERVER] Shutdown complete")

    app = FastAPI(title="Polaris Runtime", lifespan=lifespan)

    @app.exception_handler(UnknownSessionError)
    async def unknown_session_handler(request: Request, exc: UnknownSessionError) -> JSONResponse:
        logger.warning("[SERVER] %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=404, content={"detail": "Session not found"})

    @app.get("/healthz")
    def health_check():
        """
        Simple health check endpoint for uptime monitoring.
        """
        return {"status": "ok"}

    # Initialize the router modules with our shared objects, then include them.
    session_routes.init_routes(
        session_store=session_store,
        route_agent=route_agent,
    )
    map_routes.init_routes(
        session_store=session_store,
        synchronizer=synchronizer,
        client_location=client_location,
    )
    app.include_router(session_routes.router, prefix="/sessions")
    app.include_router(map_routes.router, prefix="/map")

    app.state.session_store = session_store
    app.state.route_agent = route_agent
    app.state.synchronizer = synchronizer
    return app


app = create_app()
