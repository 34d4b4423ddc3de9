"""
Perspective camera math and screen projection.

project_points maps world points through the view and projection matrices
of a CameraSnapshot into normalized device coordinates, then into pixels:

    screen_x = (ndc_x * 0.5 + 0.5) * width
    screen_y = (1 - (ndc_y * 0.5 + 0.5)) * height

Screen y grows downward. Points outside the frustum or behind the camera
are not clipped; their coordinates are returned as computed.
"""

import math

import numpy as np

from wirevessel.models import CameraSnapshot


def _normalize(v):
    norm = np.linalg.norm(v)
    if norm == 0:
        return v
    return v / norm


def orientation_matrix(camera):
    """
    3x3 rotation whose columns are the camera's right, up and back axes.

    The camera looks down its local -Z towards the target.
    """
    position = np.array(camera.position, dtype=float)
    target = np.array(camera.target, dtype=float)
    up = np.array(camera.up, dtype=float)

    z_axis = _normalize(position - target)
    if not z_axis.any():
        z_axis = np.array([0.0, 0.0, 1.0])

    x_axis = np.cross(up, z_axis)
    if np.linalg.norm(x_axis) == 0:
        # up parallel to the view direction, nudge it
        x_axis = np.cross(up, z_axis + np.array([1e-4, 0.0, 0.0]))
    x_axis = _normalize(x_axis)
    y_axis = np.cross(z_axis, x_axis)

    return np.column_stack([x_axis, y_axis, z_axis])


def view_matrix(camera):
    """4x4 world-to-camera matrix (inverse of the camera's world matrix)."""
    rotation = orientation_matrix(camera)
    position = np.array(camera.position, dtype=float)

    view = np.eye(4)
    view[:3, :3] = rotation.T
    view[:3, 3] = -rotation.T @ position
    return view


def projection_matrix(camera):
    """4x4 OpenGL-style perspective matrix, NDC in [-1, 1] on every axis."""
    near, far = camera.near, camera.far
    top = near * math.tan(math.radians(camera.fov) / 2.0)
    right = top * camera.aspect

    proj = np.zeros((4, 4))
    proj[0, 0] = near / right
    proj[1, 1] = near / top
    proj[2, 2] = -(far + near) / (far - near)
    proj[2, 3] = -2.0 * far * near / (far - near)
    proj[3, 2] = -1.0
    return proj


def view_projection_matrix(camera):
    return projection_matrix(camera) @ view_matrix(camera)


def to_ndc(points, camera):
    """(N, 3) world points to (N, 3) normalized device coordinates."""
    points = np.atleast_2d(np.asarray(points, dtype=float))
    homogeneous = np.hstack([points, np.ones((len(points), 1))])
    clip = homogeneous @ view_projection_matrix(camera).T
    with np.errstate(divide="ignore", invalid="ignore"):
        return clip[:, :3] / clip[:, 3:4]


def ndc_to_screen(ndc, viewport):
    """Map NDC x/y to pixel coordinates with y pointing down."""
    ndc = np.atleast_2d(ndc)
    screen_x = (ndc[:, 0] * 0.5 + 0.5) * viewport.width
    screen_y = (1.0 - (ndc[:, 1] * 0.5 + 0.5)) * viewport.height
    return np.column_stack([screen_x, screen_y])


def project_points(points, camera, viewport):
    """(N, 3) world points to (N, 2) pixel coordinates."""
    return ndc_to_screen(to_ndc(points, camera), viewport)


def project_point(point, camera, viewport):
    """Single world point to an (x, y) pixel tuple."""
    x, y = project_points([point], camera, viewport)[0]
    return float(x), float(y)


def pixels_per_unit(camera, viewport, distance=None):
    """
    Screen pixels covered by one world unit at the given view distance.

    distance defaults to the camera-to-target distance.
    """
    if distance is None:
        distance = float(np.linalg.norm(np.subtract(camera.position, camera.target)))
    focal = viewport.height / (2.0 * math.tan(math.radians(camera.fov) / 2.0))
    return focal / max(distance, camera.near)


def camera_from_config(camera_config, viewport):
    """Initial camera snapshot sized to the viewport."""
    return CameraSnapshot(
        fov=camera_config.fov,
        aspect=viewport.aspect,
        near=camera_config.near,
        far=camera_config.far,
        position=tuple(camera_config.position),
        target=tuple(camera_config.target),
    )


class OrbitController:
    """
    Damped orbit about the camera target.

    Input calls accumulate a pending rotation or zoom; update() applies a
    damped fraction of it and returns a new snapshot. The snapshot handed
    out is never modified afterwards.
    """

    MIN_POLAR = 1e-6

    def __init__(self, camera, damping_factor=0.05, enable_damping=True,
                 min_distance=0.0, max_distance=math.inf):
        self.camera = camera
        self.damping_factor = damping_factor
        self.enable_damping = enable_damping
        self.min_distance = min_distance
        self.max_distance = max_distance
        self._delta_theta = 0.0
        self._delta_phi = 0.0
        self._scale = 1.0

    def rotate_left(self, angle):
        self._delta_theta -= angle

    def rotate_up(self, angle):
        self._delta_phi -= angle

    def dolly(self, factor):
        """factor < 1 moves towards the target, > 1 away from it."""
        self._scale *= factor

    def is_settled(self, tol=1e-9):
        return abs(self._delta_theta) < tol and abs(self._delta_phi) < tol and abs(self._scale - 1.0) < tol

    def update(self):
        """Advance one frame and return the current camera snapshot."""
        target = np.array(self.camera.target, dtype=float)
        offset = np.array(self.camera.position, dtype=float) - target

        radius = float(np.linalg.norm(offset))
        if radius == 0:
            return self.camera
        theta = math.atan2(offset[0], offset[2])
        phi = math.acos(min(max(offset[1] / radius, -1.0), 1.0))

        if self.enable_damping:
            theta += self._delta_theta * self.damping_factor
            phi += self._delta_phi * self.damping_factor
        else:
            theta += self._delta_theta
            phi += self._delta_phi

        phi = min(max(phi, self.MIN_POLAR), math.pi - self.MIN_POLAR)
        radius = min(max(radius * self._scale, self.min_distance), self.max_distance)

        position = target + radius * np.array([
            math.sin(phi) * math.sin(theta),
            math.cos(phi),
            math.sin(phi) * math.cos(theta),
        ])

        if self.enable_damping:
            self._delta_theta *= 1.0 - self.damping_factor
            self._delta_phi *= 1.0 - self.damping_factor
        else:
            self._delta_theta = 0.0
            self._delta_phi = 0.0
        self._scale = 1.0

        self.camera = self.camera.model_copy(update={"position": tuple(float(c) for c in position)})
        return self.camera

    def resize(self, viewport):
        """Match the camera aspect to a new viewport."""
        self.camera = self.camera.model_copy(update={"aspect": viewport.aspect})
        return self.camera
