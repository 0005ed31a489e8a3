import sys

from rnbox.cli.app import main


if __name__ == "__main__":
    sys.exit(main())
