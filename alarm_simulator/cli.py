#!/usr/bin/env python3
"""
Alarm IoT Simulator - command line entry point
"""

import os
import sys
import signal
import logging
import argparse

from alarm_simulator.config import ConfigurationError, SimulatorConfig, usage
from alarm_simulator.metrics_collector import start_monitoring
from alarm_simulator.simulator import AlarmSimulator
from alarm_simulator.utils import setup_logging

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        description="Alarm IoT Simulator - posts synthetic alarm events to an Event Grid topic",
        epilog="Flags override settings files and environment variables."
    )
    parser.add_argument("--endpoint", help="Event Grid topic endpoint (AlarmTopicEndpoint)")
    parser.add_argument("--key", help="Event Grid topic key (AlarmKey)")
    parser.add_argument("--image-root", help="URL of the alarm images folder (AlarmImageRoot)")
    parser.add_argument("--images", type=int, help="Number of images in the folder (AlarmImageNumber)")
    parser.add_argument("--interval", type=int, help="Maximum ms between alarm events (AlarmInterval)")
    parser.add_argument("--devices", type=int, help="Number of alarm devices (AlarmNumDevices)")
    parser.add_argument("--max-run-time", type=int, help="Minutes to run, 0 for no limit (AlarmMaxRunTime)")
    parser.add_argument("--metrics-port", type=int, help="Prometheus metrics port, 0 to disable (AlarmMetricsPort)")
    parser.add_argument("--count", type=int, help="Stop after this many events")
    parser.add_argument("--settings-dir", help="Directory holding appsettings.json")
    parser.add_argument("--log-level", help="Logging level (LOG_LEVEL)")
    return parser


def overrides_from_args(args):
    return {
        'AlarmTopicEndpoint': args.endpoint,
        'AlarmKey': args.key,
        'AlarmImageRoot': args.image_root,
        'AlarmImageNumber': args.images,
        'AlarmInterval': args.interval,
        'AlarmNumDevices': args.devices,
        'AlarmMaxRunTime': args.max_run_time,
        'AlarmMetricsPort': args.metrics_port,
        'LOG_LEVEL': args.log_level,
    }


def setup_signal_handlers(simulator):
    """Setup signal handlers for graceful shutdown"""
    def signal_handler(signum, frame):
        logger.info(f"Received signal {signum}, stopping simulator")
        simulator.stop()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)


def print_banner(config):
    settings = config.to_dict()
    print("Alarm settings: "
          f"\n Topic EndPoint: {settings['endpoint']}"
          f"\n Topic Key (last chars): {settings['key']}"
          f"\n Image URL: {settings['image_root']}")
    print(f"Alarms will be sent randomly within each {config.interval_ms} ms.")
    if config.run_forever:
        print("The simulator will run until stopped.")
    else:
        print(f"The simulator will stop after {config.max_run_time} mins.")


def main(argv=None):
    args = build_parser().parse_args(argv)

    # Configure logging first so configuration warnings are formatted
    setup_logging(args.log_level or os.getenv('LOG_LEVEL', 'INFO'))

    try:
        config = SimulatorConfig.from_sources(args.settings_dir, overrides_from_args(args))
    except ConfigurationError as e:
        print(f"Error: {e}\n")
        print(usage())
        return 1

    setup_logging(config.log_settings.level, config.log_settings.json_format)
    print_banner(config)

    if config.metrics_port:
        start_monitoring(config.metrics_port)

    simulator = AlarmSimulator(config)
    setup_signal_handlers(simulator)
    simulator.run(max_events=args.count)
    return 0


if __name__ == "__main__":
    sys.exit(main())
