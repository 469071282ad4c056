import sys

from pwaudio_lib.cli import main

sys.exit(main())
