"""
Main entry point for running the package as a module.

Usage:
    python -m photodrop serve --storage-path files --image-cache-path cache --port 8080
    python -m photodrop export --storage-path files -o files.zip
"""

import sys
from .cli import main

if __name__ == '__main__':
    sys.exit(main())
