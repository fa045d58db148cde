# app/main.py
import os
import time
import logging
import uuid
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from app.routers.workouts import router as workouts_router
from app.db import SessionLocal  # for healthz DB check
from app.deps.workouts import get_registry
from app.engine.errors import InvalidSessionState, PersistenceError, SessionNotResumable
from app.settings import get_settings

log = logging.getLogger("uvicorn")
logging.getLogger("app").setLevel(get_settings().LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # stop any rest countdowns still ticking
    get_registry().close_all()


app = FastAPI(
    title="LiftLog API",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "workouts", "description": "Workout sessions: start, log sets, rest, finish"},
    ],
)


# CORS (relax for local dev; tighten origins in prod via env)
ALLOW_ORIGINS = os.getenv("ALLOW_ORIGINS", "*").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def add_request_id_and_log(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    response.headers["X-Request-ID"] = req_id
    log.info("rid=%s %s %s -> %s in %.1fms",
             req_id, request.method, request.url.path, response.status_code, duration_ms)
    return response

@app.exception_handler(SessionNotResumable)
async def session_not_resumable(request: Request, exc: SessionNotResumable):
    return JSONResponse(status_code=404, content={"detail": str(exc)})

@app.exception_handler(InvalidSessionState)
async def invalid_session_state(request: Request, exc: InvalidSessionState):
    return JSONResponse(status_code=409, content={"detail": str(exc)})

@app.exception_handler(PersistenceError)
async def persistence_error(request: Request, exc: PersistenceError):
    log.error("storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": str(exc)})

@app.get("/")
def root():
    return {"ok": True, "name": "LiftLog API"}

@app.get("/ping")
def ping():
    return {"pong": True}

@app.get("/healthz")
def healthz():
    # Quick DB sanity check
    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
        return {"status": "ok"}
    except Exception as e:
        return {"status": "degraded", "error": str(e)}

@app.get("/version")
def version():
    return {"version": os.getenv("API_VERSION", "dev")}

# Routers
app.include_router(workouts_router)
