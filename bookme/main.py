import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Import all models to ensure they're registered with SQLAlchemy Base
# This is needed for relationships between models in different files
from . import (
    models,  # noqa: F401
    models_invoice,  # noqa: F401
)
from .database import Base, SessionLocal, engine
from .domain.accounting.router import earnings_router
from .domain.accounting.router import router as accounting_router
from .domain.appointments.router import router as appointments_router
from .domain.availability.router import barber_router as barber_schedule_router
from .domain.availability.router import router as availability_router
from .domain.barbers.router import router as barbers_router
from .domain.catalog.router import router as services_router
from .domain.chat.router import router as chat_router
from .domain.gallery.router import router as gallery_router
from .domain.invoices.router import items_router as invoice_items_router
from .domain.invoices.router import router as invoices_router
from .domain.messages.router import router as messages_router
from .domain.notifications.router import push_router
from .domain.notifications.router import router as notifications_router
from .domain.reminders.router import router as reminders_router
from .domain.reviews.router import router as reviews_router
from .domain.settings.router import router as settings_router
from .domain.settings.service import initialize_shop_settings
from .domain.sms.router import router as sms_router
from .domain.social.router import comments_router
from .domain.social.router import router as posts_router
from .domain.users.router import profile_router
from .domain.users.router import router as auth_router

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
    except Exception as e:
        # Ignore "already exists" errors from race conditions between workers
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")

    db = SessionLocal()
    try:
        shop = initialize_shop_settings(db)
        logger.info(f"Shop settings loaded for '{shop.shopName}'")
    finally:
        db.close()

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="BookMe API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Convert 422 validation errors from HTTPBearer to 401 authentication errors
    when the issue is with the Authorization header
    """
    for error in exc.errors():
        if error.get("loc") and "authorization" in str(error.get("loc")).lower():
            logger.warning(
                f"Authentication failed for {request.url.path}: Missing or invalid Authorization header"
            )
            return JSONResponse(status_code=401, content={"detail": "No autorizado"})

    errors = jsonable_encoder(exc.errors())
    logger.warning(f"Validation error for {request.url.path}: {errors}")
    return JSONResponse(status_code=422, content={"detail": errors})


@app.middleware("http")
async def log_requests(request: Request, call_next):
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise


# CORS Configuration
ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    "http://localhost:3000,http://localhost:5173",
).split(",")

logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    expose_headers=["*"],
)

# Routes
app.include_router(auth_router)
app.include_router(profile_router)
app.include_router(barbers_router)
app.include_router(services_router)
app.include_router(availability_router)
app.include_router(barber_schedule_router)
app.include_router(earnings_router)
app.include_router(appointments_router)
app.include_router(reminders_router)
app.include_router(notifications_router)
app.include_router(push_router)
app.include_router(invoices_router)
app.include_router(invoice_items_router)
app.include_router(settings_router)
app.include_router(reviews_router)
app.include_router(accounting_router)
app.include_router(posts_router)
app.include_router(comments_router)
app.include_router(gallery_router)
app.include_router(messages_router)
app.include_router(sms_router)
app.include_router(chat_router)


@app.get("/")
def root():
    return {"message": "BookMe API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
