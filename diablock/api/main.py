"""
FastAPI main application.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from diablock import __version__

from .config import settings
from .routes import commands, data, sessions, simulate

app = FastAPI(
    title="Diablock API",
    description="Tick-driven combat simulation for an incremental action RPG",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(sessions.router, prefix="/api/sessions", tags=["Sessions"])
app.include_router(commands.router, prefix="/api/sessions", tags=["Commands"])
app.include_router(data.router, prefix="/api/data", tags=["Data"])
app.include_router(simulate.router, prefix="/api/simulate", tags=["Simulation"])


@app.get("/")
async def root():
    """API status check."""
    return {
        "status": "ok",
        "name": "Diablock API",
        "version": __version__,
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
