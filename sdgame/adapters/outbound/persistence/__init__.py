"""
Persistence Adapters
"""

from .memory_repository import (
    ReadWriteLock,
    InMemoryDesignRepository,
    InMemoryScenarioRepository,
    InMemoryGameStateRepository,
    default_scenarios,
)
from .scenario_loader import load_scenarios
from .blueprints import list_available_components

__all__ = [
    "ReadWriteLock",
    "InMemoryDesignRepository",
    "InMemoryScenarioRepository",
    "InMemoryGameStateRepository",
    "default_scenarios",
    "load_scenarios",
    "list_available_components",
]
