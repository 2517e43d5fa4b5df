import sys

from .quality_cli import main

sys.exit(main())
