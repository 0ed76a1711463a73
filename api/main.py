import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from artifacts import router as artifacts_router
from assistant import router as assistant_router
from auth import router as auth_router
from auth.guard import AdminPolicy
from auth.sessions import SessionTable
from core import db
from core.config import env_list, env_str
from core.errors import register_exception_handlers
from history import router as history_router

logging.basicConfig(
    level=env_str("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One session table and DB pool per process; a restart drops all sessions.
    app.state.sessions = SessionTable()
    app.state.admin_policy = AdminPolicy.from_env()
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(lifespan=lifespan)

# Allow local frontend dev server to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=env_list(
        "CORS_ORIGINS",
        ["http://localhost:5173", "http://127.0.0.1:5173"],
    ),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth_router.router, tags=["auth"])
app.include_router(artifacts_router.router, tags=["artifacts"])
app.include_router(history_router.router, tags=["history"])
app.include_router(assistant_router.router, tags=["assistant"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "heritage api"}
