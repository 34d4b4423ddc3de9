"""
Raster snapshot of the wire vessel.

Draws every wire, projected with the export camera, onto a canvas the size
of the viewport. Line widths are the tube diameters as seen at the
camera-to-target distance.
"""

import os

import cv2
import numpy as np

from wirevessel.render.camera import pixels_per_unit, project_points
from wirevessel.tracer import get_tracer, trace

# fixed-point bits for sub-pixel polylines
_SHIFT = 4
# keep off-canvas coordinates inside int32 after the shift
_COORD_LIMIT = 1e7


class RenderSurfaceError(RuntimeError):
    """The raster surface could not be written."""


def hex_to_rgb(color):
    """'#rrggbb' to an (r, g, b) tuple of ints."""
    color = color.lstrip("#")
    if len(color) != 6:
        raise ValueError(f"Expected a #rrggbb colour, got {color!r}")
    return tuple(int(color[i:i + 2], 16) for i in (0, 2, 4))


class RasterRenderer:
    """Anti-aliased line renderer for wire layouts."""

    def __init__(self, raster_config, backend):
        self.raster_config = raster_config
        self.backend = backend

    def line_width(self, family, wire_thickness, camera, viewport):
        diameter = 2.0 * self.backend.tube_radius(family, wire_thickness)
        width = int(round(diameter * pixels_per_unit(camera, viewport)))
        return max(width, self.raster_config.min_line_width)

    @trace(label="render_raster")
    def render(self, layout, camera, viewport, wire_thickness, color):
        """Return an RGB uint8 image of shape (height, width, 3)."""
        tracer = get_tracer()

        image = np.empty((viewport.height, viewport.width, 3), dtype=np.uint8)
        image[:, :] = hex_to_rgb(self.raster_config.background)
        rgb = hex_to_rgb(color)

        for wire in layout.all_wires():
            if len(wire.points) < 2:
                continue
            screen = project_points(wire.points, camera, viewport)
            screen = np.clip(np.nan_to_num(screen, nan=0.0), -_COORD_LIMIT, _COORD_LIMIT)
            pts = np.round(screen * (1 << _SHIFT)).astype(np.int32)
            cv2.polylines(
                image, [pts], isClosed=False, color=rgb,
                thickness=self.line_width(wire.family, wire_thickness, camera, viewport),
                lineType=cv2.LINE_AA, shift=_SHIFT,
            )

        tracer.event(f"Rasterized {len(layout.all_wires())} wires", size=f"{viewport.width}x{viewport.height}")
        return image


def save_png(image, path):
    """
    Write an RGB image as PNG.

    Raises RenderSurfaceError when OpenCV cannot write the file.
    """
    tracer = get_tracer()

    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    if not cv2.imwrite(path, cv2.cvtColor(image, cv2.COLOR_RGB2BGR)):
        raise RenderSurfaceError(f"Could not write raster snapshot to {path}")

    tracer.event(f"Saved PNG: {path}")
    return path
