"""
FastAPI dependency injection for API routes.

Provides:
  - A process-wide ``Container`` built from environment settings
  - ``get_*`` dependencies returning the use-case services
  - ``to_http_error`` mapping domain errors onto HTTP status codes
"""

import logging
from functools import lru_cache

from fastapi import HTTPException

from sdgame.config import Container, Settings
from sdgame.application.ports.inbound import (
    IDesignUseCase,
    IEvaluationUseCase,
    IGameUseCase,
    IScenarioUseCase,
)
from sdgame.domain.errors import (
    InvalidInputError,
    NotFoundError,
    SDGameError,
    SimulationInvariantViolation,
)

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


@lru_cache(maxsize=1)
def get_container() -> Container:
    return Container.from_settings(get_settings())


def get_design_service() -> IDesignUseCase:
    return get_container().design_service()


def get_scenario_service() -> IScenarioUseCase:
    return get_container().scenario_service()


def get_evaluation_service() -> IEvaluationUseCase:
    return get_container().evaluation_service()


def get_game_service() -> IGameUseCase:
    return get_container().game_service()


def to_http_error(error: SDGameError) -> HTTPException:
    """
    Map a domain error to an HTTPException.

    Usage in an endpoint::

        try:
            ...
        except SDGameError as e:
            raise to_http_error(e)
    """
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=error.to_dict())
    if isinstance(error, InvalidInputError):
        return HTTPException(status_code=400, detail=error.to_dict())
    if isinstance(error, SimulationInvariantViolation):
        logger.error("Simulation invariant violated: %s", error.message, exc_info=error)
        return HTTPException(status_code=500, detail=error.to_dict())
    logger.error("Unhandled domain error: %s", error.message, exc_info=error)
    return HTTPException(status_code=500, detail=error.to_dict())
