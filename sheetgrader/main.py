"""
FastAPI app for the bubble-sheet grader
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .core import BaseAPIException
from .routes import grading, scan
from .services import GradingSession

__version__ = "1.0.0"

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events"""
    logger.info("Starting sheet grader API...")
    logger.info(f"Environment: {'development' if settings.DEBUG else 'production'}")

    # One exam session per application instance
    app.state.grading_session = GradingSession(settings.recognition_config())

    yield

    logger.info("Shutting down sheet grader API...")
    app.state.grading_session.scanner.stop()
    app.state.grading_session = None


app = FastAPI(
    title="Sheet Grader API",
    description="Bubble-sheet recognition and grading",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(BaseAPIException)
async def api_exception_handler(request: Request, exc: BaseAPIException):
    """Handle custom API exceptions"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "error_code": exc.error_code
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions"""
    logger.error(f"Unexpected error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "An unexpected error occurred",
            "error_code": "INTERNAL_ERROR"
        }
    )


app.include_router(grading.router, prefix="/api/grading", tags=["Grading"])
app.include_router(scan.router, prefix="/api/scan", tags=["Scan"])


@app.get("/")
async def root():
    """API root endpoint"""
    return {
        "name": "Sheet Grader API",
        "version": __version__,
        "status": "running",
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring"""
    return {
        "status": "healthy",
        "version": __version__
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "sheetgrader.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info"
    )
