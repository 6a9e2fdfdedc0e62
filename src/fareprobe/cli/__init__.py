"""fareprobe Command Line Interface.

Provides CLI commands for:
- Listing and validating the target-app catalog
- Extracting a fare from text offline
- Quoting a fare from a device over adb
- Scanning the fare a foreground app already shows

Usage:
    python -m fareprobe.cli.main --help
    fareprobe apps
    fareprobe quote --app com.ubercab --destination "Cairo Festival City"
"""

from .main import main

__all__ = ["main"]
