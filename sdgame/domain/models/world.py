"""
Game State Domain Model

Persistent player state for endless mode.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class GameState:
    player_id: str
    balance: float = 1000.0
    total_users: int = 0
    system_health: float = 100.0
    uptime: float = 0.0
    last_tick: float = 0.0

    def update_metrics(self, avg_latency: float, error_rate: float, qps: float) -> None:
        """Recompute health from the last tick and credit revenue for served traffic."""
        health = 100.0
        if avg_latency > 500:
            health -= (avg_latency - 500) / 10
        health -= error_rate * 100
        self.system_health = max(0.0, health)

        success = qps * (1 - error_rate)
        self.balance += success * 0.01
        self.total_users += int(success)

    def deduct_cost(self, cost_per_second: float, duration_seconds: float) -> None:
        self.balance -= cost_per_second * duration_seconds
        self.uptime += duration_seconds

    @property
    def is_bankrupt(self) -> bool:
        return self.balance < 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "balance": round(self.balance, 4),
            "total_users": self.total_users,
            "system_health": round(self.system_health, 4),
            "uptime": self.uptime,
            "last_tick": self.last_tick,
            "is_bankrupt": self.is_bankrupt,
        }
