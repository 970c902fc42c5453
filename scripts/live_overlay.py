"""Classify the primary face from the webcam in an OpenCV window.

Usage:
    python scripts/live_overlay.py [--camera N]

Model, cascade and label paths come from Settings (MODEL_PATH, CASCADE_PATH,
LABELS_PATH env vars). Press 'q' to quit.
"""
import argparse
import logging

from facemood.config import Settings
from facemood.errors import StartupError
from facemood.live import run_live_overlay

if __name__ == '__main__':
    p = argparse.ArgumentParser()
    p.add_argument("--camera", type=int, default=None, help="Camera index (default: CAMERA_INDEX)")
    args = p.parse_args()

    logging.basicConfig(level=logging.INFO)
    try:
        n = run_live_overlay(Settings(), camera_index=args.camera)
    except StartupError as e:
        raise SystemExit(f"Could not start: {e}")
    print(f"{n} frames processed")
