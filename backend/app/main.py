from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.api import health, units, lessons, planner, generation, dashboard
from app.core.config import get_settings
from app.core.errors import register_exception_handlers
from app.core.logging_config import configure_logging, install_request_logging

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(
    title=settings.app_name,
    description="Unit plans, lessons and weekly planning with AI-assisted generation",
    version="0.1.0",
    debug=settings.debug,
)

register_exception_handlers(app)
install_request_logging(app)

# Open CORS for the whole surface
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    expose_headers=["Content-Length"],
    max_age=600,
)

# Include routers
for module in (health, units, lessons, planner, generation, dashboard):
    app.include_router(module.router, prefix=settings.route_prefix)


@app.get("/")
async def root():
    return {
        "name": settings.app_name,
        "docs": "/docs",
        "health": f"{settings.route_prefix}/health",
    }
