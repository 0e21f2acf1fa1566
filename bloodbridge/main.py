import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from . import models  # noqa: F401
from .config import BACKEND_RETRY_AFTER_SECONDS, FRONTEND_ORIGINS
from .database import Base, SessionLocal, engine
from .domain.appointments.router import router as appointments_router
from .domain.camps.router import router as camps_router
from .domain.feed.router import router as feed_router
from .domain.feed.subscription import feed_hub
from .domain.locations.router import router as locations_router
from .domain.requests.router import router as requests_router
from .domain.requests.service import RequestService
from .domain.users.router import router as users_router
from .errors import BackendUnavailable, BloodBridgeError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except OperationalError as e:
        # Ignore "already exists" errors from race conditions between workers
        if "already exists" in str(e):
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")
            raise

    db = SessionLocal()
    try:
        RequestService(db, feed_hub).load_feed()
    except OperationalError as e:
        logger.warning(f"⚠️ Feed not preloaded, it will load on first request: {e}")
    finally:
        db.close()

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="BloodBridge API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=FRONTEND_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(BloodBridgeError)
async def bloodbridge_exception_handler(request: Request, exc: BloodBridgeError):
    logger.warning(f"⚠️ {type(exc).__name__} on {request.url.path}: {exc.message}")
    headers = None
    if isinstance(exc, BackendUnavailable):
        headers = {"Retry-After": str(BACKEND_RETRY_AFTER_SECONDS)}
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_dict()}, headers=headers)


@app.exception_handler(OperationalError)
async def database_unavailable_handler(request: Request, exc: OperationalError):
    logger.error(f"❌ Database unavailable on {request.url.path}: {exc}")
    return await bloodbridge_exception_handler(request, BackendUnavailable())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Convert 422 validation errors from HTTPBearer to 401 authentication errors
    when the issue is with the Authorization header
    """
    for error in exc.errors():
        if error.get("loc") and "authorization" in str(error.get("loc")).lower():
            logger.warning(f"Authentication failed for {request.url.path}: Missing Authorization header")
            return JSONResponse(
                status_code=401,
                content={
                    "detail": "Not authenticated. Please provide a valid Bearer token in the Authorization header."
                },
            )

    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(exc.errors())})


app.include_router(locations_router)
app.include_router(feed_router)
app.include_router(requests_router)
app.include_router(appointments_router)
app.include_router(camps_router)
app.include_router(users_router)


@app.get("/")
def read_root():
    return {"message": "BloodBridge API running"}


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
