"""
Evaluation Service

Application service that resolves stored designs and scenarios and runs the
evaluation engine over them.

Architecture:
    HTTP / CLI
      └── EvaluationService          <- this module
            ├── EvaluationEngine     (domain service)
            ├── IDesignRepository    (outbound port)
            └── IScenarioRepository  (outbound port)

The engine is stateless. ``run_ticks`` threads ``next_state`` from one tick
into the next; ``restart_component`` persists state through the design's
component properties so a later ``evaluate`` picks it up.
"""

from __future__ import annotations
import logging
from typing import List, Optional

from sdgame.application.ports.inbound import IEvaluationUseCase
from sdgame.application.ports.outbound import IDesignRepository, IScenarioRepository
from sdgame.domain.errors import InvalidInputError
from sdgame.domain.models import EngineState, EvaluationResult
from sdgame.domain.services import EvaluationEngine


class EvaluationService(IEvaluationUseCase):

    def __init__(
        self,
        design_repository: IDesignRepository,
        scenario_repository: IScenarioRepository,
        engine: Optional[EvaluationEngine] = None,
    ):
        self.design_repository = design_repository
        self.scenario_repository = scenario_repository
        self.engine = engine or EvaluationEngine()
        self.logger = logging.getLogger(__name__)

    def evaluate(
        self,
        design_id: str,
        elapsed_seconds: float = 0,
        state: Optional[EngineState] = None,
    ) -> EvaluationResult:
        design = self.design_repository.get_by_id(design_id)
        scenario = self.scenario_repository.get_by_id(design.scenario_id)
        return self.engine.evaluate(design, scenario, elapsed_seconds, state=state)

    def run_ticks(
        self,
        design_id: str,
        start: float,
        end: float,
        step: float = 1,
    ) -> List[EvaluationResult]:
        if step <= 0:
            raise InvalidInputError(f"step must be > 0, got {step}", details={"step": step})
        if end < start:
            raise InvalidInputError(
                f"end ({end}) must not precede start ({start})",
                details={"start": start, "end": end},
            )

        design = self.design_repository.get_by_id(design_id)
        scenario = self.scenario_repository.get_by_id(design.scenario_id)

        results: List[EvaluationResult] = []
        state: Optional[EngineState] = None
        tick = 0
        elapsed = float(start)
        while elapsed <= end:
            result = self.engine.evaluate(design, scenario, elapsed, state=state)
            results.append(result)
            state = result.next_state
            tick += 1
            elapsed = start + tick * step

        self.logger.info(
            "Ran %d ticks for design %s (t=%s..%s, step %s)",
            len(results), design_id, start, end, step,
        )
        return results

    def restart_component(self, design_id: str, component_id: str, at: float) -> EngineState:
        design = self.design_repository.get_by_id(design_id)
        design.get_component(component_id)

        state = EngineState.from_design(design).restart(component_id, at)
        self.design_repository.save(state.apply_to(design))
        self.logger.info("Restarted component %s of design %s at t=%s", component_id, design_id, at)
        return state
