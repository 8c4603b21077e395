from __future__ import annotations

import numpy as np

from manhattan.backend import get_array_module, to_numpy
from manhattan.camera.orbit import OrbitPath
from manhattan.frame import build_renderer, camera_at, render_frame
from manhattan.viz.image import FramePlotter, RenderFrame


def main() -> None:
    use_cuda = True
    xp = get_array_module(use_cuda)

    renderer = build_renderer(xp)
    path = OrbitPath()

    # Render config
    width, height = 200, 150
    frames_n = 24
    dt = path.period(0) / frames_n

    frames: list[RenderFrame] = []
    for i in range(frames_n):
        t = i * dt
        cam = camera_at(xp, path, t)
        img = render_frame(renderer, cam, width=width, height=height)
        frames.append(
            RenderFrame(
                img=to_numpy(xp, img),
                time=t,
                cam_pos=np.asarray(to_numpy(xp, cam.position)),
            ),
        )

    plotter = FramePlotter()
    ani = plotter.animate(frames=frames, interval_ms=120)

    _ = ani  # keep reference
    plotter.show()


if __name__ == "__main__":
    main()
