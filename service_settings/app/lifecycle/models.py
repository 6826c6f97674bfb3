"""
Configurable entity models for the Settings Service.
"""

from typing import Dict, Any, Optional, List
from dataclasses import dataclass, field
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class LifecycleRefusal(str, Enum):
    """Reasons a lifecycle operation was refused."""
    NOT_FOUND = "not_found"
    AMBIGUOUS_MATCH = "ambiguous_match"
    PROTECTED_ENTITY = "protected_entity"
    DEFAULT_ENTITY = "default_entity"
    NOT_DELETED = "not_deleted"


class AppointmentStatus(BaseModel):
    """A configurable appointment status as persisted."""
    model_config = ConfigDict(extra="ignore")

    # Older stored records use "_id"
    id: Optional[str] = Field(None, validation_alias=AliasChoices("id", "_id"), description="Stable identifier")
    code: Optional[str] = Field(None, description="Immutable status code, e.g. S001")
    name_en: str = ""
    name_ar: str = ""
    color: str = "#6b7280"
    icon: Optional[str] = None
    description: Optional[str] = None
    order: Optional[int] = None
    show_in_calendar: bool = False
    is_default: bool = False
    is_active: bool = True
    is_deleted: bool = False

    @model_validator(mode="after")
    def _sync_active_flag(self) -> "AppointmentStatus":
        # is_deleted wins when a stored record disagrees with itself
        self.is_active = not self.is_deleted
        return self

    @property
    def sort_key(self) -> int:
        return self.order or 0


class StatusIdentity(BaseModel):
    """The fields used to find one exact status in a collection."""
    id: Optional[str] = None
    code: Optional[str] = None
    name_en: Optional[str] = None
    name_ar: Optional[str] = None
    color: Optional[str] = None

    @classmethod
    def of(cls, status: AppointmentStatus) -> "StatusIdentity":
        return cls(id=status.id, code=status.code, name_en=status.name_en,
                   name_ar=status.name_ar, color=status.color)


class StatusCreateRequest(BaseModel):
    """Request model for creating a status."""
    code: Optional[str] = Field(None, description="Generated when omitted")
    name_en: str
    name_ar: str
    color: str
    icon: Optional[str] = None
    description: Optional[str] = None
    order: Optional[int] = None
    show_in_calendar: bool = False
    is_default: bool = False


class StatusPatch(BaseModel):
    """Fields an edit may change. ``code`` and ``id`` are accepted and ignored."""
    model_config = ConfigDict(extra="ignore")

    code: Optional[str] = None
    id: Optional[str] = None
    name_en: Optional[str] = None
    name_ar: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    description: Optional[str] = None
    order: Optional[int] = None
    show_in_calendar: Optional[bool] = None
    is_default: Optional[bool] = None


class StatusUpdateRequest(BaseModel):
    """Request model for editing a status."""
    identity: StatusIdentity
    patch: StatusPatch


class BatchUpdateItem(BaseModel):
    """One entry of a batch reorder."""
    id: str
    order: Optional[int] = None
    show_in_calendar: Optional[bool] = None


class BatchUpdateRequest(BaseModel):
    """Request model for a batch reorder."""
    updates: List[BatchUpdateItem]


class StatusListResponse(BaseModel):
    """Response model for the status list."""
    active: List[AppointmentStatus]
    deleted: List[AppointmentStatus] = Field(default_factory=list)
    total: int


@dataclass
class Partition:
    """Active and soft-deleted statuses; every status is in exactly one."""
    active: List[AppointmentStatus] = field(default_factory=list)
    deleted: List[AppointmentStatus] = field(default_factory=list)


@dataclass
class LifecycleResult:
    """Outcome of a lifecycle operation.

    On refusal ``collection`` is the untouched input list.
    """
    collection: List[AppointmentStatus]
    entity: Optional[AppointmentStatus] = None
    refusal: Optional[LifecycleRefusal] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.refusal is None
