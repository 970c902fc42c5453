import numpy as np
import pytest

from facemood.buffers import TickArena

def test_released_on_normal_exit():
    with TickArena(1) as arena:
        buf = arena.acquire("gray", np.zeros((4, 4), dtype=np.uint8))
        arena.acquire("tensor", np.zeros((1, 3, 2, 2), dtype=np.float32))
        assert arena.get("gray") is buf and arena.live == 2
    assert arena.live == 0 and arena.acquired == arena.released == 2

def test_released_on_error():
    arena = TickArena(2)
    with pytest.raises(ValueError):
        with arena:
            arena.acquire("gray", np.zeros(3))
            raise ValueError("boom")
    assert arena.live == 0 and arena.released == 1

def test_reacquire_replaces_and_counts():
    with TickArena() as arena:
        arena.acquire("scores", np.zeros(3))
        arena.acquire("scores", np.ones(3))
        assert arena.live == 1
    assert arena.acquired == arena.released == 2

def test_closed_arena_rejects_new_buffers():
    arena = TickArena()
    arena.release_all()
    with pytest.raises(RuntimeError):
        arena.acquire("late", np.zeros(1))
