from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import matplotlib as mpl
import numpy as np
from matplotlib.animation import FuncAnimation, PillowWriter

# IMPORTANT: set backend before importing pyplot
_BACKEND = os.environ.get("MANHATTAN_MPL_BACKEND", "").strip()
if _BACKEND:
    mpl.use(_BACKEND, force=True)
else:
    for candidate in ("TkAgg", "QtAgg", "Agg"):
        # noinspection PyBroadException
        try:
            mpl.use(candidate, force=True)
            break
        except Exception:  # pragma: no cover  # noqa: BLE001, S112
            continue

import matplotlib.pyplot as plt  # noqa: E402

if TYPE_CHECKING:
    from collections.abc import Sequence


@dataclass(frozen=True, slots=True)
class RenderFrame:
    """Single render frame for animation.

    Attributes
    ----------
    img:
        Rendered RGBA image (H, W, 4), numpy float in [0, 1].
    time:
        Elapsed time the frame was rendered at.
    cam_pos:
        Camera position in world coordinates (3,).

    """

    img: np.ndarray
    time: float
    cam_pos: np.ndarray


def save_image(path: str, img: np.ndarray) -> None:
    """Write *img* to *path* (creates parent directories if needed)."""
    out_dir = os.path.dirname(path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    plt.imsave(path, np.clip(img, 0.0, 1.0))


class FramePlotter:
    """Show rendered frames, one at a time or as an animation."""

    def __init__(self, *, show_info: bool = True) -> None:
        """Initialize the plot."""
        self.show_info = show_info
        self.fig, self.ax_img = plt.subplots(1, 1, figsize=(8, 6))
        self.ax_img.axis("off")
        self.ax_img.set_title("Manhattan surface")

        self.im: Any = None

    def _title(self, frame: RenderFrame) -> str:
        if not self.show_info:
            return "Manhattan surface"
        x, y, z = (float(c) for c in frame.cam_pos)
        return f"t = {frame.time:.2f}  camera = ({x:.2f}, {y:.2f}, {z:.2f})"

    def draw(self, frame: RenderFrame) -> None:
        self.im = self.ax_img.imshow(np.clip(frame.img, 0.0, 1.0))
        self.ax_img.set_title(self._title(frame))

    def animate(self, frames: Sequence[RenderFrame], interval_ms: int = 120) -> FuncAnimation:
        if not frames:
            msg = "frames is empty"
            raise ValueError(msg)

        self.draw(frames[0])

        def _update(i: int) -> list[Any]:
            f = frames[i]
            self.im.set_data(np.clip(f.img, 0.0, 1.0))
            self.ax_img.set_title(self._title(f))
            return [self.im]

        return FuncAnimation(
            self.fig,
            _update,
            frames=len(frames),
            interval=interval_ms,
            repeat=True,
            blit=False,
        )

    @staticmethod
    def save_animation(ani: FuncAnimation, path: str, fps: int) -> None:
        out_dir = os.path.dirname(path)
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        ani.save(path, writer=PillowWriter(fps=fps))

    def close(self) -> None:
        plt.close(self.fig)

    @staticmethod
    def show() -> None:
        plt.tight_layout()
        plt.show()
