"""
Interactive view session.

A ViewSession owns the camera, its orbit controller and the tessellated
scene of the current parameter snapshot. The scene of a superseded cycle is
released before a new one is attached, and close() releases whatever is
left. Exports read the current camera snapshot and never modify it.

Usage:
    with ViewSession(config) as session:
        session.rebuild(params)
        session.tick()
        svg = session.export_svg("vessel.svg")
"""

from wirevessel.config import VesselConfig
from wirevessel.export.obj_export import export_obj
from wirevessel.export.svg_export import VectorPathExporter
from wirevessel.geometry.wires import recompute
from wirevessel.io.save_artifacts import save_svg
from wirevessel.models import METAL_PRESETS, Viewport
from wirevessel.render.camera import OrbitController, camera_from_config
from wirevessel.render.raster import RasterRenderer, save_png
from wirevessel.render.tessellate import RenderBackend
from wirevessel.tracer import get_tracer


class ViewSession:
    """Camera, controller and scene for one view lifetime."""

    def __init__(self, config=None, viewport=None):
        self.config = config or VesselConfig()
        self.viewport = viewport or Viewport(
            width=self.config.viewport.width,
            height=self.config.viewport.height,
        )
        self.backend = RenderBackend(self.config.mesh)
        self.params = None
        self.layout = None
        self.controller = None
        self._scene = None

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    @property
    def started(self):
        return self.controller is not None

    @property
    def camera(self):
        """Current camera snapshot, or None before start()."""
        return self.controller.camera if self.controller else None

    @property
    def scene(self):
        return self._scene

    def start(self, camera=None):
        """Create the camera and controller; rebuild the scene if parameters are set."""
        tracer = get_tracer()

        if camera is None:
            camera = camera_from_config(self.config.camera, self.viewport)
        self.controller = OrbitController(camera, damping_factor=self.config.camera.damping_factor)

        if self.params is not None:
            self._attach_scene()

        tracer.event("View session started", camera=camera)
        return self

    def close(self):
        """Release the scene and drop the camera. Safe to call twice."""
        self._release_scene()
        self.controller = None
        get_tracer().event("View session closed")

    def rebuild(self, params):
        """
        Recompute wires for new parameters.

        The previous scene and parameters are dropped first, so a failing
        rebuild leaves the view not ready rather than stale.
        """
        self.params = None
        self.layout = None
        self._release_scene()
        self.layout = recompute(params, self.config.sampling.render, self.config.profile)
        self.params = params
        if self.started:
            self._attach_scene()
        return self.layout

    def tick(self):
        """Advance the damped controller by one frame."""
        if not self.started:
            return None
        return self.controller.update()

    def resize(self, viewport):
        self.viewport = viewport
        if self.started:
            self.controller.resize(viewport)

    def _attach_scene(self):
        if self.layout is None:
            self.layout = recompute(self.params, self.config.sampling.render, self.config.profile)
        self._scene = self.backend.submit(self.layout, self.params.wire_thickness)

    def _release_scene(self):
        scene, self._scene = self._scene, None
        if scene is not None:
            scene.release()

    def _ready(self, what):
        if self.started and self.params is not None and self.layout is not None:
            return True
        get_tracer().event(f"{what} export skipped: view not ready", level="WARN")
        return False

    def export_svg(self, path=None):
        """SVG string of the current view, written to path if given. None when not ready."""
        if not self._ready("SVG"):
            return None
        svg = VectorPathExporter(self.config).export_string(self.params, self.camera, self.viewport)
        if path:
            save_svg(svg, path)
        return svg

    def export_png(self, path):
        """Render the current view and write it as PNG. None when not ready."""
        if not self._ready("PNG"):
            return None
        renderer = RasterRenderer(self.config.raster, self.backend)
        image = renderer.render(
            self.layout, self.camera, self.viewport,
            self.params.wire_thickness, self.params.wire_color,
        )
        save_png(image, path)
        return path

    def export_obj(self, path):
        """Write the tessellated scene as OBJ + MTL; returns both paths. None when not ready."""
        if not self._ready("OBJ") or self._scene is None:
            return None
        return export_obj(
            self._scene, path,
            color=self.params.wire_color,
            preset=METAL_PRESETS[self.params.metal_type],
            precision=self.config.mesh.precision,
        )
