"""``python -m airlock`` runs the command-line scanner."""

import sys

from airlock.cli import main

sys.exit(main())
