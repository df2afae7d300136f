import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from app.core.config import settings
from app.core.exceptions import DomainError, Unauthenticated
from app.core.logging import setup_logging
from app.database import engine, Base
from app.api.v1 import auth, users, videos, comments
from app.utils.uploads import storage

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI):
    # Create database tables and the upload tree; fail startup if either fails
    Base.metadata.create_all(bind=engine)
    storage.ensure_directories()
    logger.info("%s %s started", settings.APP_NAME, settings.VERSION)
    yield


async def domain_error_handler(request: Request, exc: DomainError):
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers=headers
    )


def create_app() -> FastAPI:
    setup_logging()
    
    application = FastAPI(
        title=settings.APP_NAME,
        version=settings.VERSION,
        description="A video sharing API built with FastAPI",
        lifespan=lifespan
    )
    
    # CORS middleware
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, specify allowed origins
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    
    application.add_exception_handler(DomainError, domain_error_handler)
    
    # Uploaded media; the directory is created during startup
    application.mount(
        storage.url_prefix,
        StaticFiles(directory=storage.root, check_dir=False),
        name="uploads"
    )
    
    # Include routers
    application.include_router(auth.router, prefix=f"{settings.API_V1_STR}/auth", tags=["Authentication"])
    application.include_router(users.router, prefix=f"{settings.API_V1_STR}/users", tags=["Users"])
    application.include_router(videos.router, prefix=f"{settings.API_V1_STR}/videos", tags=["Videos"])
    application.include_router(comments.router, prefix=f"{settings.API_V1_STR}/comments", tags=["Comments"])
    
    @application.get("/")
    def root():
        return {
            "message": f"Welcome to {settings.APP_NAME}",
            "version": settings.VERSION,
            "docs": "/docs",
            "redoc": "/redoc"
        }
    
    @application.get("/health")
    def health_check():
        return {"status": "healthy"}
    
    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
