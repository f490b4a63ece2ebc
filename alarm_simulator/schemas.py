#!/usr/bin/env python3
"""
Pydantic models for alarm event payloads
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime


class AlarmItem(BaseModel):
    """State of one simulated alarm device"""
    Thingid: int = Field(..., ge=0, description="Device identifier")
    Name: Optional[str] = None
    Latitude: Optional[float] = Field(None, ge=-90, le=90, description="Latitude in decimal degrees")
    Longitude: Optional[float] = Field(None, ge=-180, le=180, description="Longitude in decimal degrees")
    Image: Optional[str] = Field(None, description="URL of the alarm image")
    Text: Optional[str] = None
    Status: Optional[str] = None
    Data: Optional[str] = None


class AlarmEvent(BaseModel):
    """Event Grid event wrapping an alarm"""
    subject: str = "Alarm"
    id: str = Field(..., min_length=1)
    eventType: str = "AlarmTrigger"
    eventTime: str = Field(..., description="ISO 8601 timestamp with offset")
    data: AlarmItem

    @field_validator('eventTime')
    @classmethod
    def validate_event_time(cls, v):
        try:
            datetime.fromisoformat(v.replace('Z', '+00:00'))
            return v
        except ValueError:
            raise ValueError('Invalid eventTime format')


def build_payload(events: List[AlarmEvent]) -> List[Dict[str, Any]]:
    """Event Grid data is an array, one entry per event"""
    return [event.model_dump(mode='json') for event in events]
