import sys

from harmoniscope.cli import main

sys.exit(main())
