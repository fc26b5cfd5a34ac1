import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.database import engine, Base
import app.models
from app.api import users, login, password_reset, notifications, subscriptions, plan, paddle_webhook
from config import LOG_LEVEL

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)


# Run Alembic migrations on startup (replaces create_all)
def run_migrations():
    """Run pending Alembic migrations automatically on startup."""
    try:
        from alembic.config import Config
        from alembic import command
        alembic_cfg = Config("alembic.ini")
        command.upgrade(alembic_cfg, "head")
        logger.info("[Alembic] Migrations applied successfully")
    except Exception as e:
        logger.warning(f"[Alembic] Migration failed, falling back to create_all: {e}")

    Base.metadata.create_all(bind=engine)


app = FastAPI(title="SubTracker API")


@app.on_event("startup")
def on_startup():
    logger.info(f"[Startup] Database: {engine.url.render_as_string(hide_password=True)}")
    run_migrations()


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(users.router)
app.include_router(login.router)
app.include_router(password_reset.router)
app.include_router(notifications.router)
app.include_router(subscriptions.router)
app.include_router(plan.router)
app.include_router(paddle_webhook.router)

# Root endpoint
@app.get("/")
def root():
    return {
        "message": "Welcome to SubTracker API",
        "docs": "/docs",
        "redoc": "/redoc"
    }

# Health check endpoint
@app.get("/health")
def health_check():
    return {"status": "healthy", "message": "API is running"}
