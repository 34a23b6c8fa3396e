"""Entry point for running patient_roster as a module.

The roster workflow is split into two CLI commands:
  python -m patient_roster.cli.resolve        -- Build the canonical roster
  python -m patient_roster.cli.link_consults  -- Link consults to the roster
"""

import sys


def main():
    print(__doc__.strip())
    sys.exit(1)


if __name__ == "__main__":
    main()
