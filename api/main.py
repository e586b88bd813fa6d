"""
System Design Game API

FastAPI application exposing design storage, evaluation, scenarios,
component blueprints and endless mode.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from api.dependencies import get_settings
from api.routers import health, designs, scenarios, components, game
from sdgame import __version__

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="System Design Game API",
    description="API for building system designs and evaluating them against traffic scenarios",
    version=__version__,
)

origins = settings.cors_origin_list or ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=False,  # Must be False when allow_origins is "*"
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(designs.router)
app.include_router(scenarios.router)
app.include_router(components.router)
app.include_router(game.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
