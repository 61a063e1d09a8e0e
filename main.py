# main.py
import os
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sealedcookie.core.config import settings
from sealedcookie.core.exception_handlers import setup_exception_handlers
from sealedcookie.routers import session
from sealedcookie.middleware.logging_middleware import RequestLoggingMiddleware

logger = logging.getLogger("uvicorn.error")

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Encrypted, authenticated session state stored in HTTP cookies",
    docs_url="/docs",
    redoc_url="/redoc",
    debug=settings.debug,
)

setup_exception_handlers(app)

app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(session.router)

@app.get("/api/health")
async def health_check():
    return {"status": "healthy", "app_name": settings.app_name, "version": settings.app_version, "debug": settings.debug}

logger.info(f"[Session] Cookie '{session.session_cookie.name}' ready")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        log_level="debug" if settings.debug else "info",
    )
