"""
Scenario Loader

Reads a level catalog from YAML:

    scenarios:
      - id: s1
        title: TinyURL
        goal: {min_qps: 10000, max_latency_ms: 200, availability: 99.9, duration: 60}
        phases:
          - {name: Warm-up, start_qps: 100, end_qps: 1000, duration_seconds: 10}
        constraints:
          - {type: budget, value: 10}
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import List, Union

import yaml

from sdgame.domain.errors import InvalidInputError
from sdgame.domain.models import Scenario

logger = logging.getLogger(__name__)


def load_scenarios(path: Union[str, Path]) -> List[Scenario]:
    """Load scenarios from a YAML file."""
    path = Path(path)
    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if isinstance(data, dict):
        entries = data.get("scenarios") or []
    elif isinstance(data, list):
        entries = data
    else:
        raise InvalidInputError(
            f"Scenario file {path} must hold a list or a 'scenarios' key",
            details={"path": str(path)},
        )

    scenarios = []
    for entry in entries:
        if not isinstance(entry, dict) or not entry.get("id"):
            raise InvalidInputError(
                f"Scenario entry in {path} is missing an 'id'",
                details={"path": str(path), "entry": entry},
            )
        scenarios.append(Scenario.from_dict(entry))

    logger.info("Loaded %d scenario(s) from %s", len(scenarios), path)
    return scenarios
