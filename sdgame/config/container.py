"""
Dependency Injection Container

Wires ports to adapters and manages service lifecycle.
"""

from dataclasses import dataclass, field
from typing import Optional

from .settings import Settings

# Import ports
from sdgame.application.ports.inbound import (
    IDesignUseCase,
    IEvaluationUseCase,
    IGameUseCase,
    IScenarioUseCase,
)
from sdgame.application.ports.outbound import (
    IDesignRepository,
    IGameStateRepository,
    IScenarioRepository,
)

# Import adapters
from sdgame.adapters.outbound.persistence import (
    InMemoryDesignRepository,
    InMemoryGameStateRepository,
    InMemoryScenarioRepository,
    load_scenarios,
)
from sdgame.adapters.inbound.cli.display import ConsoleDisplay

# Import application services
from sdgame.application.services import (
    DesignService,
    EvaluationService,
    GameService,
    ScenarioService,
)
from sdgame.domain.config import EngineConfig
from sdgame.domain.services import EvaluationEngine


@dataclass
class Container:
    """
    Dependency injection container.

    Wires hexagonal architecture components:
    - Ports define contracts
    - Adapters implement ports
    - Services orchestrate domain logic
    """
    scenario_file: Optional[str] = None
    pass_threshold: Optional[float] = None

    _design_repository: Optional[IDesignRepository] = field(default=None, repr=False)
    _scenario_repository: Optional[IScenarioRepository] = field(default=None, repr=False)
    _game_repository: Optional[IGameStateRepository] = field(default=None, repr=False)
    _engine: Optional[EvaluationEngine] = field(default=None, repr=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Container":
        """Create container from settings."""
        return cls(
            scenario_file=settings.scenario_file,
            pass_threshold=settings.pass_threshold,
        )

    def design_repository(self) -> IDesignRepository:
        """Get the design repository singleton."""
        if not self._design_repository:
            self._design_repository = InMemoryDesignRepository()
        return self._design_repository

    def scenario_repository(self) -> IScenarioRepository:
        """Get the scenario repository singleton."""
        if not self._scenario_repository:
            scenarios = load_scenarios(self.scenario_file) if self.scenario_file else None
            self._scenario_repository = InMemoryScenarioRepository(scenarios)
        return self._scenario_repository

    def game_repository(self) -> IGameStateRepository:
        if not self._game_repository:
            self._game_repository = InMemoryGameStateRepository()
        return self._game_repository

    def engine(self) -> EvaluationEngine:
        """Get the evaluation engine singleton."""
        if not self._engine:
            config = EngineConfig().with_pass_threshold(self.pass_threshold)
            self._engine = EvaluationEngine(config)
        return self._engine

    def design_service(self) -> IDesignUseCase:
        return DesignService(repository=self.design_repository())

    def scenario_service(self) -> IScenarioUseCase:
        return ScenarioService(repository=self.scenario_repository())

    def evaluation_service(self) -> IEvaluationUseCase:
        """Get evaluation use case implementation."""
        return EvaluationService(
            design_repository=self.design_repository(),
            scenario_repository=self.scenario_repository(),
            engine=self.engine(),
        )

    def game_service(self) -> IGameUseCase:
        return GameService(
            evaluation=self.evaluation_service(),
            repository=self.game_repository(),
        )

    def display_service(self) -> ConsoleDisplay:
        """Get console display adapter."""
        return ConsoleDisplay()

    def close(self) -> None:
        """Release all singletons."""
        self._design_repository = None
        self._scenario_repository = None
        self._game_repository = None
        self._engine = None
