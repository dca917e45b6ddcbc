from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from mbbs.core.config import get_settings
from mbbs.core.errors import (
    CategoryNotFoundError,
    DuplicateUserError,
    MbbsError,
    PermissionDeniedError,
    PostNotFoundError,
    ThreadClosedError,
    ThreadNotFoundError,
    UserNotFoundError,
)
from mbbs.core.logging import configure_logging
from mbbs.api.routers import (
    health,
    users,
    categories,
    threads,
    content,
)

settings = get_settings()
configure_logging(settings.log_level, service=settings.app_name, env=settings.environment)

app = FastAPI(title=settings.app_name)

if settings.enable_cors:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

_ERROR_STATUS: list[tuple[type[MbbsError], int, str]] = [
    (ThreadNotFoundError, status.HTTP_404_NOT_FOUND, "Thread not found"),
    (PostNotFoundError, status.HTTP_404_NOT_FOUND, "Post not found"),
    (UserNotFoundError, status.HTTP_404_NOT_FOUND, "User not found"),
    (CategoryNotFoundError, status.HTTP_404_NOT_FOUND, "Category not found"),
    (DuplicateUserError, status.HTTP_409_CONFLICT, "Username or email already registered"),
    (ThreadClosedError, status.HTTP_403_FORBIDDEN, "Replies are disabled for this thread"),
]


@app.exception_handler(MbbsError)
async def mbbs_error_handler(request: Request, exc: MbbsError):
    if isinstance(exc, PermissionDeniedError):
        return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"detail": str(exc)})
    for exc_type, code, detail in _ERROR_STATUS:
        if isinstance(exc, exc_type):
            return JSONResponse(status_code=code, content={"detail": detail})
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc) or exc.__class__.__name__})


def _include(router):
    app.include_router(router, prefix=settings.api_prefix)

_include(health.router)
_include(users.router)
_include(categories.router)
_include(threads.router)
_include(content.router)

@app.get("/")
async def root():
    return {"service": settings.app_name, "status": "ok"}
