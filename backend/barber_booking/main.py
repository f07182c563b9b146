import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .config import settings
from .database import init_db
from .redis_client import redis_client
from .routers import bookings, slots, tenants

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Booking schema ready")
    yield


app = FastAPI(title="Barber Booking API", lifespan=lifespan)

app.include_router(tenants.router)
app.include_router(slots.router)
app.include_router(bookings.router)


@app.get("/health")
def health():
    return {"redis": redis_client.ping() if redis_client is not None else None}
