import os

import numpy as np
import pytest

os.environ.setdefault("MANHATTAN_MPL_BACKEND", "Agg")

from manhattan.fractal import FractalConfig, ManhattanSDF  # noqa: E402
from manhattan.frame import build_renderer  # noqa: E402
from manhattan.scene import Scene  # noqa: E402

# Top of the tallest on-axis cubie at the default scale
TOP_Z = 0.7 * 17.0 / 9.0


@pytest.fixture
def surface() -> ManhattanSDF:
    return ManhattanSDF(xp=np, config=FractalConfig())


@pytest.fixture
def scene(surface) -> Scene:
    return Scene(surface=surface)


@pytest.fixture
def renderer():
    return build_renderer(np)
