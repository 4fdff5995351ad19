import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import models  # noqa: F401 - registers tables with Base
from .config import ALLOWED_ORIGINS, SEED_DEFAULT_DATA
from .database import Base, SessionLocal, engine
from .domain.clients.router import router as clients_router
from .domain.dashboard.router import router as dashboard_router
from .domain.financials.router import router as financials_router
from .domain.marketing.router import router as marketing_router
from .domain.procedures.router import router as procedures_router
from .domain.scheduling.router import router as scheduling_router
from .domain.users.router import auth_router, texts_router
from .domain.users.router import router as users_router
from .seed import init_default_data

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
    logger.info("🚀 BeautyFlow API starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("✅ Tables ready: users, user_sessions, stored_collections")
    except Exception as e:
        # Another worker may have created them first
        if "already exists" not in str(e):
            logger.error(f"❌ Failed to create database tables: {e}")

    if SEED_DEFAULT_DATA:
        db = SessionLocal()
        try:
            if init_default_data(db):
                logger.info("Default accounts and sample data seeded")
        finally:
            db.close()

    yield
    logger.info("BeautyFlow API shutting down...")


app = FastAPI(title="BeautyFlow Studio API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Convert 422 validation errors from HTTPBearer to 401 authentication errors
    when the issue is with the Authorization header
    """
    for error in exc.errors():
        if error.get("loc") and "authorization" in str(error.get("loc")).lower():
            logger.warning(
                f"⚠️ Missing bearer token on {request.method} {request.url.path}"
            )
            return JSONResponse(
                status_code=401,
                content={
                    "detail": "Not signed in. Send the token from /auth/login as a Bearer Authorization header."
                },
            )

    logger.warning(f"⚠️ Validation error on {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=422, content={"detail": jsonable_errors(exc)})


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Validation errors without the raw exception objects pydantic attaches in ctx"""
    errors = []
    for error in exc.errors():
        errors.append({key: value for key, value in error.items() if key not in ("ctx", "input", "url")})
    return errors


logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Routes
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(texts_router)
app.include_router(clients_router)
app.include_router(procedures_router)
app.include_router(scheduling_router)
app.include_router(dashboard_router)
app.include_router(financials_router)
app.include_router(marketing_router)


@app.get("/")
def root():
    return {"message": "BeautyFlow Studio API", "status": "running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
