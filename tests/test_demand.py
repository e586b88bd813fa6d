"""
Tests for the demand model: phase interpolation and traffic modifiers.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dataclasses import replace

import pytest

from sdgame.domain.config import DemandSettings
from sdgame.domain.models import ComponentConfig, Scenario
from sdgame.domain.services import DemandModel, DemandSample
from conftest import component, flat_scenario


def source(**props):
    return ComponentConfig.resolve(component("users", "TRAFFIC_SOURCE", **props))


# =============================================================================
# Scripted rate
# =============================================================================

class TestScriptedRate:

    @pytest.mark.parametrize("elapsed,expected", [
        (0, 100),
        (5, 550),
        (15, 3000),
        (25, 7500),
        (30, 10000),
        (1000, 10000),
    ])
    def test_interpolation(self, tinyurl_scenario, elapsed, expected):
        model = DemandModel(tinyurl_scenario)
        assert model.scripted_rate(elapsed) == pytest.approx(expected)

    def test_no_phases(self):
        model = DemandModel(Scenario(id="empty"))
        assert model.scripted_rate(10) == 0.0

    def test_no_phases_uses_base_qps(self):
        model = DemandModel(Scenario(id="empty"))
        sample = model.sample(source(base_qps=250), 10)
        assert sample.total == 250


# =============================================================================
# Modifiers
# =============================================================================

class TestModifiers:

    def test_read_write_split(self):
        sample = DemandModel(flat_scenario(1000)).sample(source(read_ratio=0.8), 0)
        assert sample.read == pytest.approx(800)
        assert sample.write == pytest.approx(200)
        assert sample.malicious == 0

    def test_burst_window(self):
        model = DemandModel(Scenario(id="empty"))
        bursty = source(base_qps=100, burst_traffic=True)
        assert model.sample(bursty, 1).total == pytest.approx(500)
        assert model.sample(bursty, 12).total == pytest.approx(500)
        assert model.sample(bursty, 5).total == pytest.approx(100)

    def test_fluctuation_peak(self):
        model = DemandModel(flat_scenario(1000))
        assert model.sample(source(fluctuation=True), 7.5).total == pytest.approx(1100)
        assert model.sample(source(fluctuation=True), 22.5).total == pytest.approx(900)

    def test_random_drop_always(self):
        settings = replace(DemandSettings(), drop_probability=1.0)
        model = DemandModel(flat_scenario(1000), settings)
        dropping = source(random_drop=True)
        assert model.sample(dropping, 5).total == pytest.approx(300)
        assert model.sample(dropping, 15).total == pytest.approx(1000)

    def test_random_drop_never(self):
        settings = replace(DemandSettings(), drop_probability=0.0)
        model = DemandModel(flat_scenario(1000), settings)
        assert not any(model.in_drop_window(t) for t in range(0, 600, 7))

    def test_drop_is_reproducible(self):
        model = DemandModel(flat_scenario(1000))
        first = [model.in_drop_window(t) for t in range(0, 1200, 3)]
        second = [model.in_drop_window(t) for t in range(0, 1200, 3)]
        assert first == second

    def test_retention_scales_legitimate_traffic_only(self):
        model = DemandModel(flat_scenario(1000))
        attacker = source(attack_enabled=True, attack_base_qps=1000)
        full = model.sample(attacker, 30)
        half = model.sample(attacker, 30, retention_rate=0.5)
        assert half.total == pytest.approx(full.total / 2)
        assert half.malicious == pytest.approx(full.malicious)


# =============================================================================
# Attack traffic
# =============================================================================

class TestAttack:

    def test_disabled_by_default(self):
        assert DemandModel(flat_scenario(0)).attack_rate(source(), 40) == 0.0

    def test_warmup(self):
        model = DemandModel(flat_scenario(0))
        assert model.attack_rate(source(attack_enabled=True), 29) == 0.0

    def test_inside_window(self):
        model = DemandModel(flat_scenario(0))
        rate = model.attack_rate(source(attack_enabled=True, attack_base_qps=5000), 30)
        assert rate == pytest.approx(6500)

    def test_outside_window(self):
        model = DemandModel(flat_scenario(0))
        attacker = source(attack_enabled=True)
        assert model.attack_rate(attacker, 50) == 0.0
        assert model.attack_rate(attacker, 90) > 0.0


def test_samples_add():
    total = DemandSample(10, 8, 2, 1) + DemandSample(5, 4, 1, 0)
    assert total == DemandSample(15, 12, 3, 1)

