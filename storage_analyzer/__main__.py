import sys

from storage_analyzer.cli import main

if __name__ == "__main__":
    sys.exit(main())
