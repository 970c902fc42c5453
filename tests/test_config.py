import pytest
from facemood.config import Settings

def test_Settings():
    s = Settings()
    assert s.INPUT_SIZE == 64
    assert s.SCALE_FACTOR > 1.0
    assert s.CASCADE_PATH.endswith("haarcascade_frontalface_default.xml")
    # override via env-like behavior (construct new instance)
    s2 = Settings(INPUT_SIZE=48, MIN_NEIGHBORS=5)
    assert s2.INPUT_SIZE == 48 and s2.MIN_NEIGHBORS == 5

def test_providers_keep_cpu_fallback():
    s = Settings(PROVIDERS=[" CUDAExecutionProvider ", ""])
    assert s.PROVIDERS == ["CUDAExecutionProvider", "CPUExecutionProvider"]

def test_invalid_scale_factor():
    with pytest.raises(ValueError):
        Settings(SCALE_FACTOR=1.0)
