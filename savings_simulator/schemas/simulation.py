"""Data contracts for the catalog and multi-product simulation endpoints."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from savings_simulator.domain.catalog import FormDefaults, Product
from savings_simulator.domain.simulation import SimulationInput


class PingResponse(BaseModel):
    message: str


class GoalEntry(BaseModel):
    id: str
    label: str


class CatalogEntry(BaseModel):
    product: Product
    defaults: FormDefaults


class CatalogResponse(BaseModel):
    products: List[CatalogEntry]


class SimulationRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    goal: Optional[str] = Field(None, description="Restrict selections to products for this goal.")
    selections: List[SimulationInput] = Field(..., min_length=1)
