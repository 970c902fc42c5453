"""
FastAPI entrypoint for the emotion recognition service.

    uvicorn api.main:app

Endpoints: /health, /analyze/image, /live/start, /live/status, /live/stop.
The pipeline (cascade, ONNX model, label table) is loaded on first use.
"""
import logging
from fastapi import FastAPI
import api.routes as routes

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
app = FastAPI(title="Facemood Emotion Recognition API", version="1.0.0")
app.include_router(routes.router)

@app.get("/health")
def health() -> dict:
    """
    Liveness plus whether the pipeline has been loaded yet.

    Returns:
        dict: {"status": "ok", "pipeline_loaded": bool}
    """
    return {"status": "ok", "pipeline_loaded": routes._pipeline is not None}
