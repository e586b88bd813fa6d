"""
Demand Model

Offered traffic at one instant of simulated time, per traffic source.

Steps:
    1. Interpolate the scripted phase rate (clamped to the last phase's end)
    2. Add the source's manual base_qps
    3. Burst, fluctuation and random-drop modifiers
    4. Scale by the design's retention rate, clamp at zero, split read/write
    5. Attack traffic, tracked separately and not scaled by retention

Every modifier is a deterministic function of elapsed time so that replaying
the same tick reproduces the same demand.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Optional

from sdgame.domain.config.engine_config import DemandSettings
from sdgame.domain.models.component import ComponentConfig
from sdgame.domain.models.scenario import Scenario


@dataclass(frozen=True)
class DemandSample:
    """Traffic offered by one source (or the sum over sources)."""
    total: float = 0.0
    read: float = 0.0
    write: float = 0.0
    malicious: float = 0.0

    def __add__(self, other: DemandSample) -> DemandSample:
        return DemandSample(
            total=self.total + other.total,
            read=self.read + other.read,
            write=self.write + other.write,
            malicious=self.malicious + other.malicious,
        )


class DemandModel:
    """Samples a scenario's traffic for a given source and elapsed time."""

    def __init__(self, scenario: Scenario, settings: Optional[DemandSettings] = None):
        self.scenario = scenario
        self.settings = settings or DemandSettings()

    def scripted_rate(self, elapsed: float) -> float:
        """Phase-interpolated target rate; past the last phase, its end rate."""
        phases = self.scenario.phases
        if not phases:
            return 0.0

        offset = max(0.0, float(elapsed))
        for phase in phases:
            if phase.duration_seconds > offset:
                progress = offset / phase.duration_seconds
                return phase.start_qps + (phase.end_qps - phase.start_qps) * progress
            offset -= phase.duration_seconds
        return phases[-1].end_qps

    def sample(
        self,
        source: ComponentConfig,
        elapsed: float,
        retention_rate: float = 1.0,
    ) -> DemandSample:
        s = self.settings
        rate = self.scripted_rate(elapsed) + source.base_qps

        if source.burst_traffic and elapsed % s.burst_cycle_seconds < s.burst_window_seconds:
            rate *= s.burst_multiplier

        if source.fluctuation:
            rate *= 1 + s.fluctuation_amplitude * math.sin(
                2 * math.pi * elapsed / s.fluctuation_period_seconds
            )

        if source.random_drop and self.in_drop_window(elapsed):
            rate *= s.drop_multiplier

        rate *= min(1.0, max(0.0, retention_rate))
        rate = max(0.0, rate)

        read = rate * source.read_ratio
        return DemandSample(
            total=rate,
            read=read,
            write=rate - read,
            malicious=self.attack_rate(source, elapsed),
        )

    def in_drop_window(self, elapsed: float) -> bool:
        s = self.settings
        cycle = int(math.floor(elapsed / s.drop_cycle_seconds))
        if random.Random(cycle).random() >= s.drop_probability:
            return False
        return elapsed - cycle * s.drop_cycle_seconds < s.drop_window_seconds

    def attack_rate(self, source: ComponentConfig, elapsed: float) -> float:
        s = self.settings
        if not source.attack_enabled or elapsed < s.attack_warmup_seconds:
            return 0.0
        if (elapsed - s.attack_warmup_seconds) % s.attack_cycle_seconds >= s.attack_window_seconds:
            return 0.0
        pulse = 0.5 + 0.5 * math.sin(2 * math.pi * elapsed / s.attack_pulse_period_seconds)
        return source.attack_base_qps + s.attack_amplitude * pulse
