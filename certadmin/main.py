from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os

from certadmin.core.config import settings

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Import core components
from certadmin.core.exceptions import register_exception_handlers
from certadmin.core.firebase_config import initialize_firebase_app
from certadmin.routes import api_router, pages_router
from certadmin.services.toast_center import toast_center


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Administration of course certificates: delivery tracking, courses and staff notifications.",
    version="0.1.0",
)

# --- Event Handlers ---
@app.on_event("startup")
async def startup_event():
    logger.info("Application startup...")
    try:
        initialize_firebase_app()
        logger.info("Firebase Admin SDK initialized successfully during startup.")
    except Exception as e:
        # Pages and API calls will fail until credentials are fixed; the process still serves /api/health.
        logger.error(f"Critical error during Firebase initialization on startup: {e}", exc_info=True)

    toast_center.activate()

@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown...")

# --- Middleware ---
logger.info(f"Allowed CORS origins: {settings.CORS_ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Error Handlers ---
register_exception_handlers(app)

# --- Routers ---
app.include_router(api_router) # /api/...
app.include_router(pages_router) # /, /login, /admin/...

# --- Main execution (for development) ---
if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", "8000"))
    host = os.getenv("HOST", "0.0.0.0")
    log_level = os.getenv("UVICORN_LOG_LEVEL", "info")

    logger.info(f"Starting Uvicorn server on {host}:{port} with log level {log_level}")
    uvicorn.run(app, host=host, port=port, log_level=log_level)
