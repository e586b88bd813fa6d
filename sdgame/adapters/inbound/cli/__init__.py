"""
CLI Adapters
"""

from .display import Colors, ConsoleDisplay

__all__ = ["Colors", "ConsoleDisplay"]
