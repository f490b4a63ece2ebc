#!/usr/bin/env python3
"""
Unit tests for alarm event payload models
"""

import json
import pytest
from pydantic import ValidationError

from alarm_simulator.schemas import AlarmEvent, AlarmItem, build_payload


class TestAlarmPayload:

    def test_payload_shape(self):
        """Wire body is an array of Event Grid events with PascalCase device fields"""
        item = AlarmItem(Thingid=503, Name="Alarm 503", Latitude=52.1, Longitude=-1.2,
                         Image="https://img/photo04.png", Text="Alarm event raised at 01:02:03 15Jan24",
                         Status="?", Data="")
        event = AlarmEvent(id="0b7e3d3c-7a1f-4c55-9d0a-6f1c2a9e8e11",
                           eventTime="2024-01-15T13:02:03.123456+00:00", data=item)

        payload = build_payload([event])

        assert isinstance(payload, list) and len(payload) == 1
        assert payload[0] == {
            "subject": "Alarm",
            "id": "0b7e3d3c-7a1f-4c55-9d0a-6f1c2a9e8e11",
            "eventType": "AlarmTrigger",
            "eventTime": "2024-01-15T13:02:03.123456+00:00",
            "data": {
                "Thingid": 503,
                "Name": "Alarm 503",
                "Latitude": 52.1,
                "Longitude": -1.2,
                "Image": "https://img/photo04.png",
                "Text": "Alarm event raised at 01:02:03 15Jan24",
                "Status": "?",
                "Data": ""
            }
        }
        # Serialisable as-is
        json.dumps(payload)

    def test_unset_fields_serialise_as_null(self):
        event = AlarmEvent(id="abc", eventTime="2024-01-15T13:02:03Z", data=AlarmItem(Thingid=500))
        data = build_payload([event])[0]["data"]
        assert data["Image"] is None
        assert data["Text"] is None

    def test_invalid_event_time(self):
        with pytest.raises(ValidationError):
            AlarmEvent(id="abc", eventTime="yesterday", data=AlarmItem(Thingid=500))

    def test_invalid_coordinates(self):
        with pytest.raises(ValidationError):
            AlarmItem(Thingid=500, Latitude=95.0)
        with pytest.raises(ValidationError):
            AlarmItem(Thingid=500, Longitude=-200.0)

    def test_empty_id_rejected(self):
        with pytest.raises(ValidationError):
            AlarmEvent(id="", eventTime="2024-01-15T13:02:03Z", data=AlarmItem(Thingid=500))
