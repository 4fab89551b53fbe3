import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.config.settings import settings
from app.core.errors import register_exception_handlers
from app.core.middleware import SecurityHeadersMiddleware
from app.modules.auth import routes as auth_routes
from app.modules.profiles import routes as profiles_routes
from app.modules.weeks import routes as weeks_routes
from app.modules.career_resources import routes as career_resources_routes
from app.modules.admin_requests import routes as admin_requests_routes
from app.modules.groups import routes as groups_routes
from app.modules.ai_chat import routes as ai_chat_routes
from app.modules.schools import routes as schools_routes
from app.modules.team import routes as team_routes
from app.modules.stats import routes as stats_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

API_PREFIX = "/api"
MODULE_ROUTES = (
    auth_routes,
    profiles_routes,
    weeks_routes,
    career_resources_routes,
    admin_requests_routes,
    groups_routes,
    ai_chat_routes,
    schools_routes,
    team_routes,
    stats_routes,
)

limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
register_exception_handlers(app)

app.add_middleware(SlowAPIMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for module in MODULE_ROUTES:
    app.include_router(module.router, prefix=API_PREFIX)


def missing_configuration():
    """Settings the API cannot serve requests without"""
    required = {
        "SUPABASE_URL": settings.supabase_url,
        "SUPABASE_KEY": settings.supabase_key,
    }
    return [name for name, value in required.items() if not value]


@app.on_event("startup")
async def startup_event():
    logger.info(f"{settings.app_name} starting ({settings.environment})")
    for name in missing_configuration():
        logger.error(f"{name} is not set")
    if not settings.supabase_service_role_key:
        logger.warning("SUPABASE_SERVICE_ROLE_KEY not set; table access goes through the anon key and RLS")
    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY not set; the AI assistant is disabled")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown")


@app.get("/")
async def root():
    return {"message": f"Welcome to {settings.app_name}", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    """Readiness probe: 503 until Supabase is configured"""
    missing = missing_configuration()
    if missing:
        return JSONResponse(status_code=503, content={"status": "not ready", "missing": missing})
    return {"status": "ready"}
