"""Main module for the FastAPI application."""
from contextlib import asynccontextmanager
from typing import Dict

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from redis.exceptions import ConnectionError as RedisConnectionError

from app.cache import cache_manager
from app.dependencies import backend_connector, reverse_geocoder
from app.errors import BackendError, PaymentError
from app.logger import logger
from app.routes import admin, auth, business, pages


# ---------------------------------------------------------------------------------------
## Gestion des événements de cycle de vie (Startup/Shutdown)
@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Handle FastAPI startup and shutdown events."""
    # 🚀 DÉMARRAGE DE L'APPLICATION
    logger.info("Starting up Laundromat Locator...")

    await backend_connector.connect()

    try:
        await cache_manager.redis.ping()
        logger.info("Redis cache connected successfully.")
    except RedisConnectionError as e:
        logger.error("Failed to connect to Redis: {error}", error=e)

    yield

    # 🛑 ARRÊT DE L'APPLICATION
    logger.info("Shutting down Laundromat Locator...")
    await backend_connector.close()
    await reverse_geocoder.close()
    await cache_manager.close()
    logger.info("Backend client and Redis connection closed.")


app = FastAPI(
    title="Laundromat Locator",
    lifespan=lifespan
)

app.include_router(pages.router)
app.include_router(auth.router)
app.include_router(admin.router)
app.include_router(business.router)


def field_errors(exc: RequestValidationError) -> Dict[str, str]:
    """Une erreur par champ, pour l'affichage sous chaque input."""
    errors: Dict[str, str] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "__root__"
        message = str(error.get("msg", "Invalid value"))
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(field, message)
    return errors


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(_request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": jsonable_encoder(exc.errors()), "errors": field_errors(exc)},
    )


@app.exception_handler(PaymentError)
async def payment_exception_handler(_request: Request, exc: PaymentError):
    return JSONResponse(
        status_code=status.HTTP_402_PAYMENT_REQUIRED,
        content={"notification": exc.to_notification(), "blocked": True},
    )


@app.exception_handler(BackendError)
async def backend_exception_handler(_request: Request, exc: BackendError):
    logger.error("Unhandled backend error on {path}: {error}", path=exc.path, error=exc.message)
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": {"error": {"title": "Error", "message": exc.message, "retry": True}}},
    )


@app.get("/")
def root():
    """Root endpoint to check API status."""
    return {"status": "ok", "message": "Laundromat Locator API is running 🚀"}


@app.get("/health", status_code=status.HTTP_200_OK, tags=["Monitoring"])
async def health_check():
    """
    Health check endpoint.

    Checks connectivity to Redis and to the REST backend.
    Returns 200 OK if both are reachable, otherwise 503 Service Unavailable.
    """
    services_status = {"backend": "ok", "redis": "ok"}
    try:
        await cache_manager.redis.ping()
    except RedisConnectionError:
        services_status["redis"] = "error"
        logger.error("Health check failed: Redis connection error.")

    try:
        await backend_connector.request("GET", "/api/states")
    except BackendError:
        services_status["backend"] = "error"
        logger.error("Health check failed: backend unreachable.")

    if "error" in services_status.values():
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=services_status)

    return services_status
