import os
import random

import numpy as np
import pytest

from tfpublisher.core.reconfigure import ReconfigurationEngine
from tfpublisher.core.state import TransformState


class FakeClock:
    """Manually advanced clock for deterministic stamps."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def advance(self, seconds: float = 1.0) -> float:
        self.now += seconds
        return self.now

    def __call__(self) -> float:
        return self.now


@pytest.fixture(autouse=True)
def seed_rng() -> None:
    random.seed(0)
    np.random.seed(0)
    os.environ["PYTHONHASHSEED"] = "0"


@pytest.fixture()
def same_rotation():
    """Compare unit quaternions up to sign, since q and -q are one rotation."""

    def check(q1, q2, atol: float = 1e-9) -> bool:
        a = np.asarray(q1, dtype=np.float64)
        b = np.asarray(q2, dtype=np.float64)
        return bool(np.allclose(a, b, atol=atol) or np.allclose(a, -b, atol=atol))

    return check


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def state(clock: FakeClock) -> TransformState:
    return TransformState.from_euler(
        (0.0, 0.0, 0.0), 0.0, 0.0, 0.0, 0.1, "base_link", "camera", clock=clock
    )


@pytest.fixture()
def engine(state: TransformState) -> ReconfigurationEngine:
    return ReconfigurationEngine(state)
