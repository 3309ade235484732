import inspect
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Callable, Optional

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from openai import AsyncOpenAI

from routes.session_route import router as session_router
from services.analysis_session import Gateway
from services.openai.analysis_gateway import AnalysisGateway
from services.session_store import SessionStore
from utils.settings import Settings

BASE_DIR = Path(__file__).resolve().parent
PUBLIC_DIR = BASE_DIR / "public"

from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file if present


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


async def _close_client(client) -> None:
    """Close the OpenAI client whether its close method is sync or async."""
    aclose = getattr(client, "aclose", None) or getattr(client, "close", None)
    if aclose is None:
        return
    try:
        result = aclose()
        if inspect.isawaitable(result):
            await result
    except Exception as exc:
        logging.warning("Error while closing OpenAI client: %s", exc)


def create_app(
    settings: Optional[Settings] = None,
    gateway_factory: Optional[Callable[[], Gateway]] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application instance.

    When `gateway_factory` is given, no OpenAI client is created and every
    new session uses a gateway from the factory.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifespan manager to initialize:
          - settings (from the environment unless supplied)
          - the OpenAI async client and the analysis gateway factory
          - the in-memory session store
        and attach them to `app.state`.
        """
        app_settings = settings or Settings.from_env()
        configure_logging(app_settings.log_level)
        app.state.settings = app_settings
        app.state.openai_client = None

        factory = gateway_factory
        if factory is None:
            if not app_settings.openai_api_key:
                raise RuntimeError("OPENAI_API_KEY environment variable is not set")
            try:
                openai_client = AsyncOpenAI(api_key=app_settings.openai_api_key)
            except Exception as exc:
                raise RuntimeError("Failed to initialize OpenAI Async client") from exc
            app.state.openai_client = openai_client
            # Build once so a bad persona file fails at startup, not per session.
            AnalysisGateway(openai_client, app_settings)

            def factory() -> Gateway:
                return AnalysisGateway(openai_client, app_settings)

        app.state.session_store = SessionStore(
            factory,
            ttl_seconds=app_settings.session_ttl_seconds,
            max_sessions=app_settings.max_sessions,
        )
        logging.info("Lab copilot ready (model=%s, temperature=%s)", app_settings.model, app_settings.temperature)

        try:
            yield
        finally:
            client = getattr(app.state, "openai_client", None)
            if client is not None:
                await _close_client(client)

    app = FastAPI(lifespan=lifespan)

    # Serve static assets from the public directory, if it exists.
    if PUBLIC_DIR.exists():
        app.mount("/public", StaticFiles(directory=PUBLIC_DIR), name="public")

    @app.get("/", include_in_schema=False)
    async def serve_index():
        """
        Serve the frontend index page from the public directory.
        """
        index_path = PUBLIC_DIR / "index.html"
        if not index_path.exists():
            raise HTTPException(status_code=404, detail="Frontend not found")
        return FileResponse(index_path)

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check reporting the configured model and OpenAI client presence.
        """
        app_settings = getattr(request.app.state, "settings", None)
        has_openai = getattr(request.app.state, "openai_client", None) is not None
        return {
            "ok": True,
            "openai_available": has_openai,
            "model": app_settings.model if app_settings else None,
        }

    # Register application routers
    app.include_router(session_router)

    return app


app = create_app()
