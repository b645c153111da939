import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .api.exceptions import register_exception_handlers
from .api.routes import routers
from .core.config import get_settings
from .core.db import init_db
from .services import MonotonicClock, SessionRegistry

settings = get_settings()
logging.basicConfig(level=settings.log_level)

@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    app.state.sessions = SessionRegistry()
    app.state.clock = MonotonicClock()
    yield

app = FastAPI(title=settings.app_name, lifespan=lifespan)

for router in routers:
    app.include_router(router)
register_exception_handlers(app)

@app.get("/health")
def read_health() -> dict[str, str]:
    return {"status": "ok"}
