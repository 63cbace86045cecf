# app.py
import logging
import json
from typing import Any, Dict, List

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from asyncio import Lock

from config import DATABASE_URL, DEBUG, GEMINI_MODEL_NAME
from core.catalog import suggestions_for_role
from models.chat import ChatReply, ChatRequest
from services.chat_orchestrator import ChatOrchestrator, build_orchestrator
from services.intent_detector import EmptyMessageError
from services.shop_repository import PrismaShopRepository
from services.utils import deep_serialize


# -----------------------------
# Structured Logging Setup
# -----------------------------
class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return json.dumps(
            {
                "time": self.formatTime(record, self.datefmt),
                "level": record.levelname,
                "name": record.name,
                "message": record.getMessage(),
                "exception": record.exc_text,
            }
        )


logger = logging.getLogger("shop_assistant_api")
logger.setLevel(logging.INFO)
handler = logging.StreamHandler()
handler.setFormatter(JSONFormatter())
if not logger.handlers:
    logger.addHandler(handler)

# -----------------------------
# FastAPI App
# -----------------------------
app = FastAPI(title="Shop Assistant Chatbot API", version="1.0")

app.state.db = None
app.state.chat_orchestrator = None
app.state.db_connected = False
app.state.db_error = None

# -----------------------------
# Metrics
# -----------------------------
metrics_lock = Lock()
request_counters = {
    "quick": 0,
    "consent": 0,
    "mutation": 0,
    "view": 0,
    "general": 0,
    "total": 0,
    "errors": 0,
}


async def _count(key: str) -> None:
    async with metrics_lock:
        request_counters[key] += 1


# -----------------------------
# Failure envelope
# -----------------------------
def _failure(status_code: int, error_type: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"type": error_type, "message": message}},
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    error_type = {400: "bad_request", 503: "unavailable"}.get(exc.status_code, "server_error")
    return _failure(exc.status_code, error_type, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return _failure(400, "bad_request", "Message and user_id are required")


# -----------------------------
# Startup / Shutdown Events
# -----------------------------
@app.on_event("startup")
async def startup():
    if not DATABASE_URL:
        logger.warning("DATABASE_URL not set; chat disabled.")
        app.state.db_connected = False
        app.state.db_error = "DATABASE_URL not set"
        return

    try:
        from prisma import Prisma
        from agents.llm import get_language_model

        db = Prisma()
        await db.connect()
        app.state.db = db
        app.state.db_connected = True
        app.state.db_error = None
        logger.info("✅ Prisma DB connected")

        # Orchestrator is created ONLY after DB is ready
        app.state.chat_orchestrator = build_orchestrator(PrismaShopRepository(db), get_language_model())

    except Exception as e:
        app.state.db_connected = False
        app.state.db_error = str(e)
        logger.exception("❌ Failed to start chat services")
        if DEBUG:
            raise


@app.on_event("shutdown")
async def shutdown():
    if app.state.db_connected and app.state.db is not None:
        await app.state.db.disconnect()
        app.state.db_connected = False
        logger.info("✅ Prisma DB disconnected")

# -----------------------------
# API Endpoints
# -----------------------------
@app.get("/")
async def root():
    return {"message": "Shop Assistant Chatbot API is running."}


@app.get("/health")
async def health() -> Dict[str, Any]:
    info = {
        "status": "ok" if app.state.chat_orchestrator is not None else "degraded",
        "db_connected": app.state.db_connected,
        "model": GEMINI_MODEL_NAME,
    }
    if app.state.db_error:
        info["db_error"] = app.state.db_error
    return info


@app.get("/metrics")
async def metrics() -> Dict[str, Any]:
    async with metrics_lock:
        return request_counters.copy()


@app.get("/suggestions")
async def suggestions(role: str = "customer") -> Dict[str, List[str]]:
    return {"suggestions": suggestions_for_role(role)}


@app.post("/chat")
async def chat(request: ChatRequest):
    await _count("total")

    orchestrator: ChatOrchestrator = app.state.chat_orchestrator
    if orchestrator is None:
        await _count("errors")
        raise HTTPException(status_code=503, detail="Chat unavailable")

    try:
        logger.info(
            f"[REQUEST_START] user_id={request.user_id}, role={request.role.value}, "
            f"text_length={len(request.text)}"
        )

        reply: ChatReply = await orchestrator.handle(request.text, request.user_id, request.role)
        await _count(reply.kind)

        logger.info(
            f"[REPLY] user_id={request.user_id}, kind={reply.kind}, "
            f"intent={reply.intent.value}, requires_consent={reply.requires_consent}"
        )
        return deep_serialize(reply)

    except EmptyMessageError as e:
        await _count("errors")
        raise HTTPException(status_code=400, detail=str(e))

    except Exception as e:
        await _count("errors")
        logger.exception(f"[ERROR] user_id={request.user_id}, exception={e}")
        raise HTTPException(
            status_code=500,
            detail=str(e) if DEBUG else "An unexpected error occurred",
        )


# -----------------------------
# Entrypoint
# -----------------------------
import os
import uvicorn

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run("API_LAYER.app:app", host="0.0.0.0", port=port, workers=1)
