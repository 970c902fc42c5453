"""
CLI to classify faces in a video or image file -> JSON timeline.
"""
from __future__ import annotations
import argparse, json, logging, os

import cv2

from facemood.config import Settings
from facemood.pipeline import build_pipeline
from facemood.source import CameraSource, IterableSource
from facemood.visual import annotate_video

IMAGE_EXTS = {".jpg", ".jpeg", ".png", ".bmp", ".webp"}


def analyze_file(path: str, settings: Settings, annotated: str | None = None) -> list[dict]:
    pipeline = build_pipeline(settings)
    timeline: list[dict] = []
    sink = lambda tick, frame: timeline.append(tick.model_dump())

    if os.path.splitext(path)[1].lower() in IMAGE_EXTS:
        img = cv2.imread(path)
        if img is None:
            raise FileNotFoundError(f"Could not read image: {path}")
        pipeline.run(IterableSource([img]), sink)
    elif annotated:
        annotate_video(path, annotated, pipeline, on_tick=sink)
    else:
        with CameraSource(path) as source:
            pipeline.run(source, sink)
    return timeline


def main():
    p = argparse.ArgumentParser()
    p.add_argument("--input", required=True, help="Path to input video or image")
    p.add_argument("--out", default="output/emotions.json", help="Path to output JSON")
    p.add_argument("--annotated", default=None, help="Optional path for an annotated video copy")
    args = p.parse_args()

    logging.basicConfig(level=logging.INFO)
    settings = Settings()
    timeline = analyze_file(args.input, settings, args.annotated)

    os.makedirs(os.path.dirname(args.out) or ".", exist_ok=True)
    with open(args.out, "w", encoding="utf-8") as f:
        json.dump(timeline, f, indent=2, ensure_ascii=False)
    print(f"✅ {len(timeline)} frames written to {args.out}")

if __name__ == "__main__":
    main()
