#!/usr/bin/env python3
"""
Simulated alarm device fleet
"""

import random
from datetime import datetime
from typing import List

from alarm_simulator.location import BoundingBox
from alarm_simulator.schemas import AlarmItem

FIRST_THING_ID = 500


def build_devices(count: int, box: BoundingBox, rng: random.Random = None) -> List[AlarmItem]:
    """Create a fixed set of devices, each at a random location inside the box"""
    rng = rng or random.Random()
    devices = []

    for i in range(count):
        longitude, latitude = box.random_location(rng)
        thing_id = FIRST_THING_ID + i
        devices.append(AlarmItem(
            Thingid=thing_id,
            Name=f"Alarm {thing_id}",
            Latitude=float(latitude),
            Longitude=float(longitude),
            Status="?",
            Data=""
        ))

    return devices


def alarm_image(image_root: str, image_number: int, rng: random.Random = None) -> str:
    """Pick one of photo01.png .. photoNN.png under the image root"""
    rng = rng or random.Random()
    value = rng.randint(1, image_number)
    return f"{image_root}photo{value:02d}.png"


def alarm_text(now: datetime) -> str:
    return f"Alarm event raised at {now.strftime('%I:%M:%S %d%b%y')}"
