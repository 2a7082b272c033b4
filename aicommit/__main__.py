import sys

from aicommit.cli.main import run

sys.exit(run())
