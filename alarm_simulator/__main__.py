import sys

from alarm_simulator.cli import main

sys.exit(main())
