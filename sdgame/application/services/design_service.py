"""
Design Service

Validates and stores player designs.
"""

from __future__ import annotations
import logging
import time
from typing import Callable, List

from sdgame.application.ports.inbound import IDesignUseCase
from sdgame.application.ports.outbound import IDesignRepository
from sdgame.domain.models import ComponentConfig, Design


class DesignService(IDesignUseCase):

    def __init__(self, repository: IDesignRepository, clock: Callable[[], float] = time.time):
        self.repository = repository
        self.clock = clock
        self.logger = logging.getLogger(__name__)

    def save_design(self, design: Design) -> Design:
        design.validate()
        # Reject bad property values at save time rather than on first evaluation
        for comp in design.components:
            ComponentConfig.resolve(comp)

        now = int(self.clock())
        if not design.created_at:
            design.created_at = now
        design.updated_at = now

        self.repository.save(design)
        self.logger.info(
            "Saved design %s (%d components, %d connections)",
            design.id, len(design.components), len(design.connections),
        )
        return design

    def get_design(self, design_id: str) -> Design:
        return self.repository.get_by_id(design_id)

    def list_designs(self, player_id: str = "") -> List[Design]:
        return self.repository.list_by_player_id(player_id)
