from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from shortlink_app.config import settings
from shortlink_app.database.connection import init_db
from shortlink_app.logging_config import setup_logging
from shortlink_app.middleware import LoggingMiddleware
from shortlink_app.services.exceptions import ShortlinkError
from shortlink_app.api.errors import (
    shortlink_error_handler,
    request_validation_error_handler,
    unhandled_error_handler
)
from shortlink_app.api.v1 import urls, redirect

setup_logging(
    level=settings.log_level,
    log_file=settings.log_file or None,
    json_format=settings.log_json
)

# Create the urls table (and its unique index on short_code)
init_db()

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="A URL shortener service built with FastAPI",
    debug=settings.debug
)

app.add_middleware(LoggingMiddleware)
app.add_exception_handler(ShortlinkError, shortlink_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_error_handler)
app.add_exception_handler(Exception, unhandled_error_handler)


@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "environment": settings.environment}


######## Include routers
app.include_router(urls.router, prefix="/api")
# Catch-all /{short_code} must come last
app.include_router(redirect.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.host, port=settings.port, reload=settings.debug)
