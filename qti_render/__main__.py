import sys

from qti_render.cli import main

sys.exit(main())
