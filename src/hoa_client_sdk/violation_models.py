from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from .models import ProviderRow

UNKNOWN_CATEGORY = "Other"
UNKNOWN_ASSOCIATION = "Unknown Association"
DEFAULT_CATEGORY_COLOR = "#6B7280"


class ViolationStatus(str, Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"
    DISMISSED = "Dismissed"


class Priority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class ViolationCategory(ProviderRow):
    id: str
    name: str
    description: str | None = None
    color: str = DEFAULT_CATEGORY_COLOR
    is_system_category: bool = False
    is_active: bool = True
    sort_order: int = 0
    association_id: str | None = None


class _CategoryRef(ProviderRow):
    id: str
    name: str
    color: str | None = None


class _AssociationRef(ProviderRow):
    id: str
    name: str


class Violation(BaseModel):
    id: str
    association_id: str
    association: str = UNKNOWN_ASSOCIATION
    address: str
    description: str
    category_id: str | None = None
    category: str = UNKNOWN_CATEGORY
    status: ViolationStatus
    priority: Priority
    date_reported: str
    date_resolved: str | None = None
    reported_by: str
    notes: str | None = None
    photos: List[str] = Field(default_factory=list)


class ViolationRow(ProviderRow):
    """A ``violations`` row with its category and association embedded."""

    id: str
    association_id: str
    address: str
    description: str
    category_id: str | None = None
    status: ViolationStatus
    priority: Priority
    date_reported: str
    date_resolved: str | None = None
    reported_by: str
    notes: str | None = None
    photos: Optional[List[str]] = None
    created_by: str | None = None
    created_at: str | None = None
    category_ref: _CategoryRef | None = Field(default=None, alias="violation_categories")
    association_ref: _AssociationRef | None = Field(default=None, alias="associations")

    def to_violation(self) -> Violation:
        return Violation(
            id=self.id,
            association_id=self.association_id,
            association=self.association_ref.name if self.association_ref else UNKNOWN_ASSOCIATION,
            address=self.address,
            description=self.description,
            category_id=self.category_id,
            category=self.category_ref.name if self.category_ref else UNKNOWN_CATEGORY,
            status=self.status,
            priority=self.priority,
            date_reported=self.date_reported,
            date_resolved=self.date_resolved,
            reported_by=self.reported_by,
            notes=self.notes,
            photos=self.photos or [],
        )


class ViolationFormData(BaseModel):
    address: str
    description: str
    category_id: str | None = None
    status: ViolationStatus = ViolationStatus.PENDING
    priority: Priority = Priority.MEDIUM
    date_reported: str
    date_resolved: str | None = None
    reported_by: str
    notes: str | None = None
    photos: List[str] = Field(default_factory=list)

    def to_row(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "description": self.description,
            "category_id": self.category_id,
            "status": self.status.value,
            "priority": self.priority.value,
            "date_reported": self.date_reported,
            "date_resolved": self.date_resolved or None,
            "reported_by": self.reported_by,
            "notes": self.notes or None,
            "photos": self.photos or None,
        }


class ViolationFilters(BaseModel):
    search: str = ""
    category: str = "All"
    status: ViolationStatus | str = "All"
    priority: Priority | str = "All"
    association: str | None = None
