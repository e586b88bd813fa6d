"""
API Routers
"""

from . import health, designs, scenarios, components, game

__all__ = ["health", "designs", "scenarios", "components", "game"]
