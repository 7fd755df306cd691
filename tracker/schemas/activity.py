"""
Pydantic schemas for activity and audit trails.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ActivityLogCreate(BaseModel):
    """Schema for an activity entry."""
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    action_type: str
    action_description: Optional[str] = None
    contact_id: Optional[str] = None
    contact_name: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


class AuditLogCreate(BaseModel):
    """Schema for an audit entry."""
    admin_id: Optional[str] = None
    admin_name: Optional[str] = None
    admin_email: Optional[str] = None
    admin_role: Optional[str] = None
    action_type: str
    action_description: Optional[str] = None
    target_user_id: Optional[str] = None
    target_user_name: Optional[str] = None
    target_user_email: Optional[str] = None
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


class ActivityLogResponse(ActivityLogCreate):
    """Schema for activity entry response."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime


class AuditLogResponse(AuditLogCreate):
    """Schema for audit entry response."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime


class DailyActivity(BaseModel):
    date: str
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    action_type: str
    count: int


class ActivityTotal(BaseModel):
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    action_type: str
    total_count: int


class AnalyticsPeriod(BaseModel):
    start: datetime
    end: datetime
    days: int


class AnalyticsResponse(BaseModel):
    """Activity counts over a period."""
    activities: List[DailyActivity] = Field(default_factory=list)
    summary: List[ActivityTotal] = Field(default_factory=list)
    period: AnalyticsPeriod
