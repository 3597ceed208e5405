import inspect
import logging
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from openai import AsyncOpenAI

from dal.record_store import RecordStore
from routes.analysis_route import router as analysis_router
from routes.navigation_route import router as navigation_router
from routes.realtime_ws import router as realtime_router
from services.image_preprocessor import ImagePreprocessor
from services.navigation.analysis_relay import AICollaborators, AnalysisRelay
from services.navigation.session_coordinator import SessionCoordinator
from services.openai.audio_classifier import AudioEventClassifier
from services.openai.audio_transcriber import AudioTranscriber
from services.openai.instruction_generator import InstructionGenerator
from services.openai.vision_analyzer import VisionAnalyzer
from services.realtime.broadcaster import Broadcaster
from utils.config import AppConfig
from utils.logging_setup import setup_logging

load_dotenv()  # Load environment variables from .env file if present

LOGGER = logging.getLogger(__name__)


def build_openai_collaborators(client: AsyncOpenAI, config: AppConfig) -> AICollaborators:
    """Wire the OpenAI-backed services used by the analysis relay."""
    return AICollaborators(
        vision=VisionAnalyzer(client, model=config.vision_model),
        transcriber=AudioTranscriber(client, model=config.transcribe_model),
        audio_classifier=AudioEventClassifier(client, model=config.text_model),
        instruction_generator=InstructionGenerator(client, model=config.text_model),
    )


async def _close_client(client) -> None:
    """Close the OpenAI client if it exposes a close/aclose method."""
    aclose = getattr(client, "aclose", None) or getattr(client, "close", None)
    if aclose is None:
        return
    try:
        if inspect.iscoroutinefunction(aclose):
            await aclose()
        else:
            result = aclose()
            if inspect.isawaitable(result):
                await result
    except Exception:
        # Ignore shutdown errors to avoid masking more important issues.
        LOGGER.debug("Error while closing OpenAI client", exc_info=True)


def create_app(config: Optional[AppConfig] = None, ai: Optional[AICollaborators] = None) -> FastAPI:
    """
    Create and configure the FastAPI application instance.

    Args:
        config: Settings to use; read from the environment when omitted.
        ai: Pre-built AI collaborators. When omitted an AsyncOpenAI client is
            created at startup, which requires OPENAI_API_KEY.
    """
    config = config or AppConfig.from_env()
    setup_logging(config.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifespan manager to initialize:
          - the in-memory record store and session coordinator
          - the realtime broadcaster
          - the OpenAI async client and the analysis relay built on it
        and attach them to `app.state`.
        """
        store = RecordStore()
        coordinator = SessionCoordinator(store, enforce_single_active=config.enforce_single_active)
        broadcaster = Broadcaster(queue_size=config.broadcast_queue_size)

        openai_client = None
        collaborators = ai
        if collaborators is None:
            if not config.openai_api_key:
                raise RuntimeError("OPENAI_API_KEY environment variable is not set")
            try:
                openai_client = AsyncOpenAI(api_key=config.openai_api_key)
            except Exception as exc:
                raise RuntimeError("Failed to initialize OpenAI Async client") from exc
            collaborators = build_openai_collaborators(openai_client, config)

        app.state.config = config
        app.state.record_store = store
        app.state.session_coordinator = coordinator
        app.state.broadcaster = broadcaster
        app.state.openai_client = openai_client
        app.state.analysis_relay = AnalysisRelay(
            store,
            coordinator,
            broadcaster,
            collaborators,
            image_preprocessor=ImagePreprocessor(max_dimension=config.max_image_dimension),
            max_upload_bytes=config.max_upload_bytes,
            default_audio_level=config.default_audio_level,
            recent_limit=config.recent_context_limit,
        )
        LOGGER.info(
            "Navigation server ready (vision_model=%s, single_active=%s)",
            config.vision_model,
            config.enforce_single_active,
        )

        try:
            yield
        finally:
            await broadcaster.close()
            if openai_client is not None:
                await _close_client(openai_client)

    app = FastAPI(title="Assistive Navigation Server", lifespan=lifespan)

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check reporting store contents, AI wiring, and open realtime connections.
        """
        state = request.app.state
        return {
            "ok": True,
            "records": state.record_store.counts(),
            "openai_available": getattr(state, "openai_client", None) is not None,
            "realtime_connections": state.broadcaster.connection_count,
        }

    # Register application routers
    app.include_router(navigation_router)
    app.include_router(analysis_router)
    app.include_router(realtime_router)

    return app


app = create_app()
