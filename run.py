#!/usr/bin/env python3
"""Convenience runner for the route heatmap renderer.

Usage:
    python run.py activities.json --output heatmap.png
"""
import logging
import sys

from strava_heatmap.main import main

if __name__ == "__main__":
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s %(name)s: %(message)s")
    sys.exit(main())
