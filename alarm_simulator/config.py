#!/usr/bin/env python3
"""
Simulator Configuration Management
Handles settings files, environment variables and configuration validation
"""

import os
import json
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Any, Optional
from dataclasses import dataclass, field
from dotenv import load_dotenv
from pydantic import ValidationError

from alarm_simulator.location import BoundingBox, DEFAULT_BOX

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ('AlarmTopicEndpoint', 'AlarmKey', 'AlarmImageRoot')
BOUND_KEYS = ('AlarmMaxLat', 'AlarmMinLat', 'AlarmMaxLong', 'AlarmMinLong')


class ConfigurationError(Exception):
    """Raised when a required setting is missing or unusable"""

    def __init__(self, key: str, message: Optional[str] = None):
        self.key = key
        super().__init__(message or f"'{key}' configuration is missing.")


def load_settings(settings_dir: Optional[str] = None, environment: Optional[str] = None) -> Dict[str, str]:
    """
    Merge appsettings.json, appsettings.<environment>.json and the process
    environment, later sources winning.
    """
    settings_dir = settings_dir or os.getcwd()
    environment = environment or os.getenv('ENVIRONMENT', 'production')

    settings: Dict[str, str] = {}
    for name in ('appsettings.json', f'appsettings.{environment}.json'):
        path = os.path.join(settings_dir, name)
        if not os.path.exists(path):
            continue
        with open(path, 'r') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ConfigurationError(name, f"Settings file {path} must contain a JSON object")
        settings.update({k: str(v) for k, v in data.items() if v is not None})
        logger.debug(f"Loaded settings from {path}")

    # Environment variables override settings files
    for key, value in os.environ.items():
        if key.startswith('Alarm') or key in ('LOG_LEVEL', 'LOG_FORMAT'):
            settings[key] = value

    return settings


def _parse_int(settings: Dict[str, str], key: str, default: int) -> int:
    raw = settings.get(key)
    if raw is None or str(raw).strip() == '':
        return default
    try:
        return int(str(raw).strip())
    except ValueError:
        logger.warning(f"Configuration warning: {key}={raw!r} is not an integer, using {default}")
        return default


def _parse_bounds(settings: Dict[str, str]) -> Optional[BoundingBox]:
    """All four bounds must parse, otherwise the default box applies"""
    values = []
    for key in BOUND_KEYS:
        raw = settings.get(key)
        if raw is None:
            return None
        try:
            value = Decimal(str(raw).strip())
        except InvalidOperation:
            return None
        # NaN and Infinity parse but are not coordinates
        if not value.is_finite():
            return None
        values.append(value)
    max_lat, min_lat, max_long, min_long = values
    try:
        return BoundingBox(max_lat=max_lat, min_lat=min_lat, max_long=max_long, min_long=min_long)
    except ValidationError as e:
        raise ConfigurationError('AlarmMaxLat', f"Invalid latitude/longitude bounds: {e}") from e


def normalize_url(url: Optional[str]) -> str:
    """Ensure a folder URL ends with a slash"""
    if not url:
        return ''
    if not url.endswith('/'):
        url += '/'
    return url


def mask_secret(secret: Optional[str], visible: int = 4) -> str:
    if not secret:
        return 'N/A'
    return secret[-visible:]


@dataclass
class EndpointConfig:
    """Event topic configuration"""
    url: str
    key: str
    timeout: float = 10.0

    @classmethod
    def from_settings(cls, settings: Dict[str, str]) -> 'EndpointConfig':
        return cls(
            url=settings.get('AlarmTopicEndpoint', ''),
            key=settings.get('AlarmKey', ''),
            timeout=float(_parse_int(settings, 'AlarmRequestTimeout', 10))
        )


@dataclass
class ImageConfig:
    """Alarm image location and total number"""
    root: str
    number: int = 20

    @classmethod
    def from_settings(cls, settings: Dict[str, str]) -> 'ImageConfig':
        return cls(
            root=normalize_url(settings.get('AlarmImageRoot', '')),
            number=_parse_int(settings, 'AlarmImageNumber', 20)
        )


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = 'INFO'
    json_format: bool = False

    @classmethod
    def from_settings(cls, settings: Dict[str, str]) -> 'LoggingConfig':
        return cls(
            level=settings.get('LOG_LEVEL', 'INFO').upper(),
            json_format=settings.get('LOG_FORMAT', 'text').lower() == 'json'
        )


@dataclass
class SimulatorConfig:
    """Main simulator configuration"""
    endpoint: EndpointConfig
    images: ImageConfig
    interval_ms: int = 30000
    num_devices: int = 10
    max_run_time: int = 60
    box: BoundingBox = field(default_factory=lambda: DEFAULT_BOX)
    metrics_port: int = 0
    log_settings: LoggingConfig = field(default_factory=LoggingConfig)
    warnings: list = field(default_factory=list)

    @classmethod
    def from_sources(cls, settings_dir: Optional[str] = None,
                     overrides: Optional[Dict[str, Any]] = None) -> 'SimulatorConfig':
        """Build configuration from settings files, .env, environment and overrides"""
        settings_dir = settings_dir or os.getcwd()
        load_dotenv(os.path.join(settings_dir, '.env'))

        settings = load_settings(settings_dir)
        for key, value in (overrides or {}).items():
            if value is not None:
                settings[key] = str(value)

        return cls.from_settings(settings)

    @classmethod
    def from_settings(cls, settings: Dict[str, str]) -> 'SimulatorConfig':
        for key in REQUIRED_KEYS:
            if not settings.get(key):
                raise ConfigurationError(key)

        warnings = []
        box = _parse_bounds(settings)
        if box is None:
            if any(settings.get(key) for key in BOUND_KEYS):
                warnings.append("Latitude and longitude bounds must all be provided as decimals - using default area")
            box = DEFAULT_BOX

        config = cls(
            endpoint=EndpointConfig.from_settings(settings),
            images=ImageConfig.from_settings(settings),
            interval_ms=_parse_int(settings, 'AlarmInterval', 30000),
            num_devices=_parse_int(settings, 'AlarmNumDevices', 10),
            max_run_time=_parse_int(settings, 'AlarmMaxRunTime', 60),
            box=box,
            metrics_port=_parse_int(settings, 'AlarmMetricsPort', 0),
            log_settings=LoggingConfig.from_settings(settings),
            warnings=warnings
        )
        config._validate_config()
        return config

    def _validate_config(self):
        """Validate configuration and log warnings"""
        if self.images.number < 1:
            raise ConfigurationError('AlarmImageNumber', "'AlarmImageNumber' must be at least 1.")

        if self.num_devices < 1:
            raise ConfigurationError('AlarmNumDevices', "'AlarmNumDevices' must be at least 1.")

        if self.interval_ms < 0:
            raise ConfigurationError('AlarmInterval', "'AlarmInterval' cannot be negative.")

        if self.max_run_time < 0:
            raise ConfigurationError('AlarmMaxRunTime', "'AlarmMaxRunTime' cannot be negative.")

        if self.box.swapped:
            self.warnings.append("Minimum and maximum bounds were reversed - swapped them")

        if not self.endpoint.url.lower().startswith('https://'):
            self.warnings.append("Topic endpoint is not using HTTPS")

        for warning in self.warnings:
            logger.warning(f"Configuration warning: {warning}")

    @property
    def run_forever(self) -> bool:
        return self.max_run_time == 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary (key masked)"""
        return {
            'endpoint': self.endpoint.url,
            'key': mask_secret(self.endpoint.key),
            'request_timeout': self.endpoint.timeout,
            'image_root': self.images.root,
            'image_number': self.images.number,
            'interval_ms': self.interval_ms,
            'num_devices': self.num_devices,
            'max_run_time': self.max_run_time,
            'bounds': {
                'max_lat': str(self.box.max_lat),
                'min_lat': str(self.box.min_lat),
                'max_long': str(self.box.max_long),
                'min_long': str(self.box.min_long)
            },
            'metrics_port': self.metrics_port
        }


def usage() -> str:
    return (
        "Required environment variables"
        "\n------------------------------"
        "\n\nAlarmTopicEndpoint: The Event Grid Topic EndPoint."
        "\nAlarmKey: The Event Grid Topic key."
        "\nAlarmImageRoot: The URL to the source of the alarm images. Each image in the folder must be"
        " named photoXX.png where XX = 01,02 etc.."
        "\n\nOptional environment variables"
        "\n------------------------------"
        "\nAlarmImageNumber: The number of images in the image URL. Minimum of 1, default = 20."
        "\nAlarmInterval: The maximum ms between alarm events, default = 30000."
        "\nAlarmNumDevices: The number of alarms, default = 10."
        "\nAlarmMaxLat AlarmMinLat AlarmMaxLong AlarmMinLong - Describes the area within which random"
        " coordinates will be created, default = central England."
        "\nLatitude and Longitude must all be decimal with 6 decimal places and all 4 must be provided."
        "\nAlarmMaxRunTime: The maximum number of minutes for the events to be generated, zero for no max."
        " Default = 60."
        "\nAlarmRequestTimeout: Seconds to wait for the topic endpoint, default = 10."
        "\nAlarmMetricsPort: Port for the Prometheus metrics endpoint, default = 0 (disabled)."
        "\nLOG_LEVEL: Logging level, default = INFO. LOG_FORMAT: text or json, default = text."
    )
