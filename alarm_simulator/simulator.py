#!/usr/bin/env python3
"""
Alarm IoT Simulator - Event dispatch loop
Posts synthetic alarm events from a fleet of devices to an Event Grid topic
"""

import time
import random
import logging
import threading
from datetime import datetime
from typing import List, Optional

import requests

from alarm_simulator.config import SimulatorConfig
from alarm_simulator.devices import alarm_image, alarm_text, build_devices
from alarm_simulator.metrics_collector import (
    CONFIGURED_DEVICES, POST_DURATION, track_alarm_event
)
from alarm_simulator.schemas import AlarmEvent, AlarmItem, build_payload
from alarm_simulator.utils import generate_correlation_id

logger = logging.getLogger(__name__)

SAS_KEY_HEADER = 'aeg-sas-key'


class AlarmSimulator:
    def __init__(self, config: SimulatorConfig, session: requests.Session = None,
                 rng: random.Random = None, devices: List[AlarmItem] = None):
        self.config = config
        self.rng = rng or random.Random()
        self.session = session or requests.Session()
        self.session.headers.update({
            'Accept': 'application/json',
            SAS_KEY_HEADER: config.endpoint.key
        })
        self.devices = devices if devices is not None else build_devices(
            config.num_devices, config.box, self.rng
        )
        self.end_time: Optional[float] = None
        self.sent = 0
        self.failed = 0
        self._stop_event = threading.Event()
        self.clock = time.time

        CONFIGURED_DEVICES.set(len(self.devices))

    def build_event(self, device: AlarmItem, now: datetime = None) -> AlarmEvent:
        """Refresh the device's image and text and wrap it in a new event"""
        now = now or datetime.now().astimezone()

        device.Image = alarm_image(self.config.images.root, self.config.images.number, self.rng)
        device.Text = alarm_text(now)

        return AlarmEvent(
            subject="Alarm",
            id=generate_correlation_id(),
            eventType="AlarmTrigger",
            eventTime=now.isoformat(),
            data=device
        )

    def send_event(self, event: AlarmEvent) -> bool:
        """POST a single-event array to the topic endpoint"""
        device = event.data

        with POST_DURATION.time():
            response = self.session.post(
                self.config.endpoint.url,
                json=build_payload([event]),
                timeout=self.config.endpoint.timeout
            )

        if response.ok:
            self.sent += 1
            logger.info(
                f"Id: {device.Thingid}. Longitude: {device.Longitude}. "
                f"Latitude: {device.Latitude}. Image: {device.Image}"
            )
            track_alarm_event(device.Thingid, event.id, status='success',
                              longitude=device.Longitude, latitude=device.Latitude,
                              image=device.Image)
            return True

        self.failed += 1
        logger.warning(f"Post unsuccessful: {response.status_code} {response.reason}")
        track_alarm_event(device.Thingid, event.id, status='rejected',
                          http_status=response.status_code, reason=response.reason)
        return False

    def step(self) -> bool:
        """Send one event from a randomly chosen device, logging any failure"""
        try:
            device = self.rng.choice(self.devices)
            return self.send_event(self.build_event(device))
        except Exception as e:
            self.failed += 1
            track_alarm_event(None, None, status='error', error=str(e))
            logger.exception(f"Error sending alarm: {e}")
            return False

    def is_max_time(self) -> bool:
        # Zero run time means never time out
        if self.config.run_forever or self.end_time is None:
            return False
        return self.clock() > self.end_time

    def next_delay(self) -> float:
        """Random pause in seconds, up to the configured interval"""
        if self.config.interval_ms <= 0:
            return 0.0
        return self.rng.randrange(0, self.config.interval_ms) / 1000.0

    def stop(self):
        self._stop_event.set()

    @property
    def running(self) -> bool:
        return not self._stop_event.is_set()

    def run(self, max_events: Optional[int] = None) -> int:
        """Run until stopped, timed out or max_events attempts made; returns events accepted"""
        if not self.devices:
            logger.warning("No devices to send events from.")
            return 0

        self._stop_event.clear()
        self.end_time = self.clock() + self.config.max_run_time * 60
        attempts = 0

        logger.info(f"Starting alarm simulation with {len(self.devices)} devices")

        while self.running:
            if max_events is not None and attempts >= max_events:
                break

            self.step()
            attempts += 1

            if self.is_max_time():
                logger.info(f"Maximum time reached ({self.config.max_run_time} mins), simulator stopping.")
                break

            if max_events is not None and attempts >= max_events:
                break

            # Pause before the next alarm, returning early if stopped
            self._stop_event.wait(self.next_delay())

        logger.info(f"Simulation finished: {self.sent} sent, {self.failed} failed")
        return self.sent
