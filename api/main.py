"""
FastAPI Application — HTTP host for the hotel concierge bot.

Provides:
- POST   /api/messages                                   one inbound activity → one turn
- DELETE /api/conversations/{channel_id}/{conversation_id}  forget a conversation
- GET    /health                                         store backend, dialogs, reply mode

In "inline" reply mode the turn's replies come back in the response
body; in "connector" mode they are posted to the activity's service URL
and the request is answered with 202.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Callable, Optional

import structlog

# Load .env before any config is read
from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from api.runtime import BotRuntime
from config.logging_config import bind_turn_context, clear_turn_context, configure_logging
from config.settings import Settings, get_settings
from database.store_base import BaseStateStore
from database.store_factory import create_store
from models.schemas import Activity

logger = structlog.get_logger()


# ──────────────────────────────────────────────────────────────
#  Response Models
# ──────────────────────────────────────────────────────────────

class TurnResponse(BaseModel):
    activities: list[dict[str, Any]] = []


class ResetResponse(BaseModel):
    channel_id: str
    conversation_id: str
    deleted: bool


# ──────────────────────────────────────────────────────────────
#  App factory
# ──────────────────────────────────────────────────────────────

def create_app(
    settings: Optional[Settings] = None,
    store: Optional[BaseStateStore] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level, settings.log_json)
        runtime_kwargs = {"clock": clock} if clock else {}
        runtime = BotRuntime(settings, store or create_store(settings.storage), **runtime_kwargs)
        app.state.runtime = runtime
        logger.info("concierge_started",
                    store=runtime.store.backend,
                    reply_mode=runtime.adapter.reply_mode,
                    dialogs=runtime.bot.dialogs.ids())
        yield
        await runtime.close()
        logger.info("concierge_stopped")

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Hotel concierge bot on a stack-based dialog runtime",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ══════════════════════════════════════════════════════════
    #  HEALTH
    # ══════════════════════════════════════════════════════════

    @app.get("/health")
    async def health(request: Request):
        runtime: BotRuntime = request.app.state.runtime
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "store": runtime.store.backend,
            "reply_mode": runtime.adapter.reply_mode,
            "dialogs": runtime.bot.dialogs.ids(),
        }

    # ══════════════════════════════════════════════════════════
    #  MESSAGES
    # ══════════════════════════════════════════════════════════

    @app.post("/api/messages")
    async def receive_activity(activity: Activity, request: Request):
        runtime: BotRuntime = request.app.state.runtime
        bind_turn_context(
            channel=activity.channel_id,
            conversation=activity.conversation.id if activity.conversation else "",
            activity_id=activity.id,
        )
        try:
            sent = await runtime.process(activity)
        except Exception as e:
            logger.error("turn_failed", error_type=type(e).__name__, error=str(e))
            return JSONResponse(
                status_code=500,
                content={"error": type(e).__name__, "detail": str(e)},
            )
        finally:
            clear_turn_context()

        if runtime.adapter.reply_mode == "connector":
            return JSONResponse(status_code=202, content={"sent": len(sent)})
        return TurnResponse(activities=[a.to_wire() for a in sent])

    @app.delete("/api/conversations/{channel_id}/{conversation_id}")
    async def reset_conversation(channel_id: str, conversation_id: str, request: Request):
        runtime: BotRuntime = request.app.state.runtime
        deleted = await runtime.reset(channel_id, conversation_id)
        return ResetResponse(channel_id=channel_id, conversation_id=conversation_id, deleted=deleted)

    return app


app = create_app()


# ══════════════════════════════════════════════════════════════
#  Entry Point
# ══════════════════════════════════════════════════════════════

def main() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run("api.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
