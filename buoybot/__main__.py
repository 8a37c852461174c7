import sys

from buoybot.cli import main

sys.exit(main())
