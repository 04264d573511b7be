import sys

from rpsarena.cli import main

sys.exit(main())
