import sys

from dust.modules.cli import main

sys.exit(main())
