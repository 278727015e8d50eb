from fastapi import FastAPI, Request, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from ideaboard.core.config import get_settings
from ideaboard.core.logging import configure_logging
from ideaboard.api.routers import (
    health,
    users,
    ideas,
    calendar,
)

settings = get_settings()
configure_logging(settings.log_level, service=settings.app_name)

app = FastAPI(title=settings.app_name)

if settings.enable_cors:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Middleware approach ensures even endpoints without dependency declaration are protected.
if settings.auth_enabled:
    EXEMPT_PATHS = {
        "/",  # root
        f"{settings.api_prefix}/health/liveness",
        f"{settings.api_prefix}/health/readiness",
        app.openapi_url,
    }
    EXEMPT_PATHS = {p for p in EXEMPT_PATHS if isinstance(p, str)}
    EXEMPT_PREFIXES = (
        "/docs",
        "/redoc",
    )

    def _unauthorized(detail: str) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"detail": detail})

    @app.middleware("http")
    async def auth_middleware(request: Request, call_next):
        if request.method == "OPTIONS":  # allow CORS preflight without auth
            return await call_next(request)
        path = request.url.path
        if path in EXEMPT_PATHS or any(path.startswith(prefix) for prefix in EXEMPT_PREFIXES):
            return await call_next(request)
        auth = request.headers.get("Authorization")
        if not auth or not auth.startswith("Bearer "):
            return _unauthorized("Missing bearer token")
        token = auth[len("Bearer "):].strip()
        try:
            from ideaboard.core.auth import _verify_token  # local import to avoid circular
            claims = await _verify_token(token, settings)
        except HTTPException as e:
            return _unauthorized(str(e.detail))
        except Exception:
            return _unauthorized("Invalid bearer token")
        request.state.verified_claims = claims
        return await call_next(request)

def _include(router):
    app.include_router(router, prefix=settings.api_prefix)

_include(health.router)
_include(users.router)
_include(ideas.router)
_include(calendar.router)

@app.get("/")
async def root():
    return {"service": settings.app_name, "status": "ok"}
