"""
Project Models

A project groups costs and revenues. Line items live only inside their
project: deleting the project deletes them, and nothing else refers to them.

Project status is set by the user. Progress is derived
(see calculations.status.project_progress).
"""

from enum import Enum
from typing import Optional

from pydantic import Field

from finance_tracker.models.common import (
    ZERO,
    Entity,
    FinanceModel,
    Money,
    NaiveDatetime,
    OptionalNaiveDatetime,
)


class ProjectCategory(str, Enum):
    DEVELOPMENT = "development"
    DESIGN = "design"
    CONSULTING = "consulting"
    MARKETING = "marketing"
    SALES = "sales"
    OTHER = "other"


class ProjectStatus(str, Enum):
    """User-set lifecycle status. NOT derived."""
    PLANNING = "planning"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    PAUSED = "paused"


class CostCategory(str, Enum):
    MATERIAL = "material"
    SERVICE = "service"
    SOFTWARE = "software"
    EQUIPMENT = "equipment"
    TRANSPORT = "transport"
    OTHER = "other"


class RevenueInstallment(FinanceModel):
    """Position of a revenue line in an installment plan (e.g. 2 of 3)."""

    current: int = Field(..., ge=1)
    total: int = Field(..., ge=1)


class ProjectCost(Entity):
    """A cost line item of a project."""

    name: str = Field(default="", max_length=200)
    category: CostCategory = CostCategory.OTHER
    amount: Money = Field(default=ZERO, ge=0)
    date: NaiveDatetime
    description: Optional[str] = Field(default=None, max_length=1000)
    is_paid: bool = False


class ProjectRevenue(Entity):
    """A revenue line item of a project."""

    name: str = Field(default="", max_length=200)
    amount: Money = Field(default=ZERO, ge=0)
    date: NaiveDatetime
    expected_date: OptionalNaiveDatetime = None
    description: Optional[str] = Field(default=None, max_length=1000)
    is_received: bool = False
    installment: Optional[RevenueInstallment] = None


class Project(Entity):
    """A project with its exclusively owned cost and revenue lines."""

    name: str = Field(default="", max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    category: ProjectCategory = ProjectCategory.OTHER
    status: ProjectStatus = ProjectStatus.PLANNING
    start_date: NaiveDatetime
    end_date: OptionalNaiveDatetime = None
    estimated_end_date: OptionalNaiveDatetime = None
    client: Optional[str] = Field(default=None, max_length=200)
    total_budget: Optional[Money] = Field(default=None, ge=0)
    costs: list[ProjectCost] = Field(default_factory=list)
    revenues: list[ProjectRevenue] = Field(default_factory=list)
