"""
Evaluation Use Case Port

Interface defining the contract for evaluating stored designs.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from sdgame.domain.models import EngineState, EvaluationResult


class IEvaluationUseCase(ABC):
    """
    Inbound port for design evaluation.

    Resolves a stored design and its scenario, then runs the engine.
    """

    @abstractmethod
    def evaluate(
        self,
        design_id: str,
        elapsed_seconds: float = 0,
        state: Optional[EngineState] = None,
    ) -> EvaluationResult:
        """
        Evaluate a stored design at one instant.

        Args:
            design_id: Stored design identifier
            elapsed_seconds: Offset into the design's scenario
            state: Tick state; lifted from the design's properties when None

        Raises:
            NotFoundError: if the design or its scenario is unknown
            InvalidInputError: if the design is malformed
        """
        pass

    @abstractmethod
    def run_ticks(
        self,
        design_id: str,
        start: float,
        end: float,
        step: float = 1,
    ) -> List[EvaluationResult]:
        """Evaluate consecutive ticks, threading each result's next_state."""
        pass

    @abstractmethod
    def restart_component(self, design_id: str, component_id: str, at: float) -> EngineState:
        """Clear a crash and persist the restart through the design's properties."""
        pass
