import logging
import time
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.config import settings
from app.core.rate_limit import limiter
from app.modules.activity import routes as activity_routes
from app.modules.ai_prompts import routes as ai_prompts_routes
from app.modules.auth import routes as auth_routes
from app.modules.cadastros import routes as cadastros_routes
from app.modules.credits import routes as credits_routes
from app.modules.dashboard import routes as dashboard_routes
from app.modules.groups import routes as groups_routes
from app.modules.materials import routes as materials_routes
from app.modules.my_suppliers import routes as my_suppliers_routes
from app.modules.partners import routes as partners_routes
from app.modules.payments import routes as payments_routes
from app.modules.permissions import routes as permissions_routes
from app.modules.products import routes as products_routes
from app.modules.suppliers import routes as suppliers_routes
from app.modules.templates import routes as templates_routes
from app.modules.tickets import routes as tickets_routes
from app.modules.users import routes as users_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

STARTED_AT = time.monotonic()

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid request data", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
    return JSONResponse(status_code=500, content={"detail": str(exc)})


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"DENY"),
                    (b"X-XSS-Protection", b"1; mode=block"),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include module routes
app.include_router(auth_routes.router, prefix="/api")
app.include_router(users_routes.router, prefix="/api")
app.include_router(groups_routes.router, prefix="/api")
app.include_router(permissions_routes.router, prefix="/api")
app.include_router(cadastros_routes.router, prefix="/api")
app.include_router(partners_routes.router, prefix="/api")
app.include_router(suppliers_routes.router, prefix="/api")
app.include_router(my_suppliers_routes.router, prefix="/api")
app.include_router(products_routes.router, prefix="/api")
app.include_router(tickets_routes.router, prefix="/api")
app.include_router(materials_routes.router, prefix="/api")
app.include_router(templates_routes.router, prefix="/api")
app.include_router(ai_prompts_routes.router, prefix="/api")
app.include_router(credits_routes.router, prefix="/api")
app.include_router(payments_routes.router, prefix="/api")
app.include_router(activity_routes.router, prefix="/api")
app.include_router(dashboard_routes.router, prefix="/api")


@app.on_event("startup")
async def startup_event():
    if not settings.supabase_url:
        raise RuntimeError("SUPABASE_URL must be set. Did you forget to provision a database?")
    logger.info(f"Application startup ({settings.environment}, sessions: {settings.session_backend})")
    if not settings.stripe_secret_key:
        logger.warning("STRIPE_SECRET_KEY not set; payment endpoints will answer 503")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown")


@app.get("/")
async def root():
    return {"message": f"Welcome to {settings.app_name}", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - STARTED_AT, 3),
    }


@app.get("/ready")
@limiter.exempt
async def ready():
    """Readiness check: the database must be configured."""
    if not settings.supabase_url:
        return JSONResponse(status_code=503, content={"status": "not ready"})
    return {"status": "ready"}
