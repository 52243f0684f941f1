import inspect
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from openai import AsyncOpenAI

from routes.session_route import router as session_router
from services.conversation.session_store import SessionStore
from utils.settings import ConversationSettings, require_api_key

from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file if present

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan manager to initialize:
      - the conversation settings read from the environment
      - the OpenAI async client
      - the in-memory session store
    and attach them to `app.state`.
    """
    app.state.settings = ConversationSettings.from_env()
    require_api_key()

    try:
        openai_client = AsyncOpenAI()
    except Exception as exc:
        raise RuntimeError("Failed to initialize OpenAI Async client") from exc

    app.state.openai_client = openai_client
    app.state.session_store = SessionStore()

    try:
        yield
    finally:
        # Gracefully close the OpenAI client if it exposes a close/aclose method.
        client = getattr(app.state, "openai_client", None)
        if client is not None:
            aclose = getattr(client, "aclose", None) or getattr(client, "close", None)
            if aclose is not None:
                try:
                    if inspect.iscoroutinefunction(aclose):
                        await aclose()
                    else:
                        result = aclose()
                        if inspect.isawaitable(result):
                            await result
                except Exception:
                    logging.getLogger(__name__).warning("OpenAI client did not close cleanly", exc_info=True)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application instance.
    """
    app = FastAPI(lifespan=lifespan)

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check that reports OpenAI client presence and open sessions.
        """
        has_openai = (
            hasattr(request.app.state, "openai_client")
            and request.app.state.openai_client is not None
        )
        store = getattr(request.app.state, "session_store", None)
        return {
            "ok": True,
            "openai_available": has_openai,
            "open_sessions": len(store) if store is not None else 0,
        }

    app.include_router(session_router)

    return app


app = create_app()
