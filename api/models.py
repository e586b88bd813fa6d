"""
Pydantic models for API requests and responses.
"""

from pydantic import BaseModel, Field
from typing import Dict, Any, List, Optional


class ComponentModel(BaseModel):
    id: str = Field(..., description="Component identifier, unique within a design")
    name: str = Field(default="", description="Display name")
    type: str = Field(..., description="Component type, e.g. WEB_SERVER")
    setup_cost: float = Field(default=0.0, description="One-off purchase cost")
    operational_cost: float = Field(default=0.0, description="Running cost per second")
    properties: Dict[str, Any] = Field(default_factory=dict, description="Type-specific properties")


class ConnectionModel(BaseModel):
    from_id: str = Field(..., description="Upstream component id")
    to_id: str = Field(..., description="Downstream component id")
    protocol: str = Field(default="HTTP")
    traffic_type: str = Field(default="all")


class DesignRequest(BaseModel):
    id: str = Field(..., description="Design identifier")
    player_id: str = Field(default="", description="Owning player")
    scenario_id: str = Field(..., description="Scenario the design is played against")
    components: List[ComponentModel] = Field(default_factory=list)
    connections: List[ConnectionModel] = Field(default_factory=list)
    properties: Dict[str, Any] = Field(default_factory=dict, description="Global properties, e.g. retention_rate")


class AdvanceRequest(BaseModel):
    design_id: str = Field(..., description="Design to run this tick")
    elapsed: float = Field(default=0.0, ge=0, description="Scenario offset in seconds")
    duration: float = Field(default=1.0, gt=0, description="Seconds of running cost to charge")


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    version: str
    message: Optional[str] = None
