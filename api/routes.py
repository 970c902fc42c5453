"""
REST endpoints for single-image classification and the live loop.
"""
from typing import Optional
import logging

import cv2
import numpy as np
from fastapi import APIRouter, UploadFile, File, HTTPException
from fastapi.responses import JSONResponse

from facemood.config import Settings
from facemood.errors import FacemoodError, StartupError
from facemood.frames import Frame
from facemood.live import LiveAnalyzer, camera_factory
from facemood.pipeline import FramePipeline, build_pipeline

router = APIRouter()
settings = Settings()
logger = logging.getLogger(__name__)

_pipeline: Optional[FramePipeline] = None
_live: Optional[LiveAnalyzer] = None


def get_pipeline() -> FramePipeline:
    """Build the pipeline on first use; startup failures map to 503."""
    global _pipeline
    if _pipeline is None:
        try:
            _pipeline = build_pipeline(settings)
        except StartupError as e:
            logger.error(f"[api] pipeline startup failed: {e}")
            raise HTTPException(status_code=503, detail=f"Pipeline not ready: {e}")
    return _pipeline


def get_live() -> LiveAnalyzer:
    global _live
    if _live is None:
        _live = LiveAnalyzer(get_pipeline(), camera_factory(settings))
    return _live


@router.post("/analyze/image")
async def analyze_image(file: UploadFile = File(...)):
    """
    Classify the primary face in an uploaded image (one pipeline tick).

    Returns:
        JSONResponse: TickResult payload; status is NO_FACE when nothing was detected.
    """
    data = await file.read()
    logger.debug(f"[api] /analyze/image filename={file.filename} bytes={len(data)}")
    img = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_COLOR) if data else None
    if img is None:
        raise HTTPException(status_code=400, detail="Could not decode image")

    pipeline = get_pipeline()
    try:
        tick = pipeline.process(Frame(img))
    except FacemoodError as e:
        logger.exception("[api] analyze_image failed")
        raise HTTPException(status_code=500, detail=str(e))
    return JSONResponse(tick.model_dump())


@router.post("/live/start")
async def live_start():
    live = get_live()
    try:
        started = live.start()
    except StartupError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return {"status": "started" if started else "already_running"}


@router.get("/live/status")
async def live_status():
    if _live is None:
        return {"running": False}
    return JSONResponse(_live.status().model_dump())


@router.post("/live/stop")
async def live_stop():
    if _live is None or not _live.stop():
        return {"status": "not_running"}
    return {"status": "stopped"}
