"""
Vector line drawing of the wire vessel.

The exporter regenerates the wires at export resolution from the same
curve and formulas as the render pass, projects every vertex through the
camera snapshot that was active in the view, and writes one straight-segment
path per wire. Output depends only on (parameters, camera, viewport) and is
formatted at a fixed precision, so repeated exports are byte-identical.
"""

import svgwrite

from wirevessel.geometry.wires import WireFamily, recompute
from wirevessel.render.camera import project_points
from wirevessel.tracer import get_tracer, trace

FAMILY_GROUPS = (
    (WireFamily.RING, "rings"),
    (WireFamily.VERTICAL, "verticals"),
    (WireFamily.DIAGONAL, "diagonals"),
)


def polyline_path_data(screen_points, precision=2):
    """'M x y L x y ...' for an (N, 2) array of pixel coordinates."""
    commands = []
    for i, (x, y) in enumerate(screen_points):
        op = "M" if i == 0 else "L"
        commands.append(f"{op} {x:.{precision}f} {y:.{precision}f}")
    return " ".join(commands)


class VectorPathExporter:
    """Builds SVG documents from parameters and a camera snapshot."""

    def __init__(self, config):
        self.config = config

    @trace(label="export_svg")
    def export(self, params, camera, viewport):
        """
        Create the SVG drawing.

        Returns an svgwrite.Drawing sized to the viewport. With no wires the
        drawing still has its three (empty) family groups.
        """
        tracer = get_tracer()
        stroke = self.config.stroke

        layout = recompute(params, self.config.sampling.export, self.config.profile)

        dwg = svgwrite.Drawing(
            size=(f"{viewport.width}px", f"{viewport.height}px"),
            viewBox=f"0 0 {viewport.width} {viewport.height}",
            style="background:white",
            debug=False,
        )

        wires = layout.all_wires()
        for family, group_id in FAMILY_GROUPS:
            group = dwg.g(
                id=group_id,
                fill="none",
                stroke=stroke.color,
                stroke_width=stroke.width,
                stroke_linecap="round",
                stroke_linejoin="round",
            )
            for wire in wires:
                if wire.family != family:
                    continue
                screen = project_points(wire.points, camera, viewport)
                group.add(dwg.path(d=polyline_path_data(screen, stroke.precision), id=wire.name))
            dwg.add(group)

        tracer.event(f"SVG built with {len(wires)} paths", layout=layout)
        return dwg

    def export_string(self, params, camera, viewport):
        """The SVG document as a string."""
        return self.export(params, camera, viewport).tostring()
