"""
Tube tessellation of wire polylines.

RenderBackend.submit turns a WireLayout into one triangle mesh per wire.
Each polyline vertex gets a ring of radial_segments vertices in the plane
normal to the wire, oriented by parallel-transported frames so tubes do
not twist along the curve.
"""

from dataclasses import dataclass

import numpy as np

from wirevessel.geometry.wires import WireFamily
from wirevessel.tracer import get_tracer, trace


@dataclass(eq=False)
class TubeMesh:
    """Triangle mesh of one wire. faces index into vertices (0-based)."""
    name: str
    family: WireFamily
    vertices: np.ndarray
    faces: np.ndarray


class TessellatedScene:
    """
    Meshes for one geometry cycle.

    release() drops the buffers; the scene is unusable afterwards.
    """

    def __init__(self, meshes, wire_thickness):
        self._meshes = list(meshes)
        self.wire_thickness = wire_thickness
        self.released = False

    @property
    def meshes(self):
        if self.released:
            raise RuntimeError("Tessellated scene has been released")
        return self._meshes

    @property
    def vertex_count(self):
        return sum(len(m.vertices) for m in self.meshes)

    @property
    def face_count(self):
        return sum(len(m.faces) for m in self.meshes)

    def release(self):
        self._meshes = []
        self.released = True


def _unit(vectors):
    norms = np.linalg.norm(vectors, axis=-1, keepdims=True)
    return np.divide(vectors, norms, out=np.zeros_like(vectors), where=norms > 0)


def polyline_tangents(points, closed=False):
    """Unit tangents by central differences; wraps around when closed."""
    if closed:
        tangents = np.roll(points, -1, axis=0) - np.roll(points, 1, axis=0)
    elif len(points) > 1:
        tangents = np.gradient(points, axis=0)
    else:
        tangents = np.zeros_like(points)
    tangents = _unit(tangents)

    # zero-length tangents inherit from a neighbour
    for i in range(1, len(tangents)):
        if not tangents[i].any():
            tangents[i] = tangents[i - 1]
    for i in range(len(tangents) - 2, -1, -1):
        if not tangents[i].any():
            tangents[i] = tangents[i + 1]
    return tangents


def _rotate(vector, axis, angle):
    """Rodrigues rotation of vector about a unit axis."""
    cos_a = np.cos(angle)
    sin_a = np.sin(angle)
    return vector * cos_a + np.cross(axis, vector) * sin_a + axis * np.dot(axis, vector) * (1.0 - cos_a)


def parallel_transport_frames(tangents):
    """Normals and binormals carried along the tangents without twist."""
    n = len(tangents)
    normals = np.zeros((n, 3))
    if n == 0:
        return normals, normals.copy()

    t0 = tangents[0] if tangents[0].any() else np.array([0.0, 1.0, 0.0])
    axis = np.zeros(3)
    axis[np.argmin(np.abs(t0))] = 1.0
    side = _unit(np.cross(t0, axis))
    normals[0] = np.cross(t0, side)

    for i in range(1, n):
        normals[i] = normals[i - 1]
        rot_axis = np.cross(tangents[i - 1], tangents[i])
        length = np.linalg.norm(rot_axis)
        if length > 1e-12:
            angle = np.arccos(np.clip(np.dot(tangents[i - 1], tangents[i]), -1.0, 1.0))
            normals[i] = _rotate(normals[i - 1], rot_axis / length, angle)

    binormals = np.cross(tangents, normals)
    return normals, binormals


def tessellate_tube(points, radius, radial_segments=8, closed=False):
    """
    Vertices and triangle faces of a tube around a polyline.

    A closed polyline (last point equal to the first) is wrapped without a
    duplicated seam.
    """
    points = np.asarray(points, dtype=float)
    if closed and len(points) > 1 and np.allclose(points[0], points[-1]):
        points = points[:-1]

    n = len(points)
    if n < 2:
        return np.zeros((0, 3)), np.zeros((0, 3), dtype=np.int64)

    tangents = polyline_tangents(points, closed=closed)
    normals, binormals = parallel_transport_frames(tangents)

    angles = 2.0 * np.pi * np.arange(radial_segments) / radial_segments
    cos_a = np.cos(angles)[None, :, None]
    sin_a = np.sin(angles)[None, :, None]
    directions = cos_a * normals[:, None, :] + sin_a * binormals[:, None, :]
    vertices = (points[:, None, :] + radius * directions).reshape(-1, 3)

    segments = n if closed else n - 1
    i = np.arange(segments)[:, None]
    j = np.arange(radial_segments)[None, :]
    i_next = (i + 1) % n
    j_next = (j + 1) % radial_segments

    a = (i * radial_segments + j).ravel()
    b = (i_next * radial_segments + j).ravel()
    c = (i_next * radial_segments + j_next).ravel()
    d = (i * radial_segments + j_next).ravel()
    faces = np.concatenate([np.stack([a, b, d], axis=1), np.stack([b, c, d], axis=1)])

    return vertices, faces.astype(np.int64)


class RenderBackend:
    """Tessellates wire layouts into tube meshes."""

    def __init__(self, mesh_config):
        self.mesh_config = mesh_config

    def tube_radius(self, family, wire_thickness):
        """Rings are the thickest wires, diagonals the thinnest."""
        divisors = {
            WireFamily.RING: self.mesh_config.ring_radius_divisor,
            WireFamily.VERTICAL: self.mesh_config.vertical_radius_divisor,
            WireFamily.DIAGONAL: self.mesh_config.diagonal_radius_divisor,
        }
        return wire_thickness / divisors[family]

    @trace(label="submit")
    def submit(self, layout, wire_thickness):
        """Tessellate every wire of the layout into a new scene."""
        tracer = get_tracer()

        meshes = []
        for wire in layout.all_wires():
            vertices, faces = tessellate_tube(
                wire.points,
                self.tube_radius(wire.family, wire_thickness),
                radial_segments=self.mesh_config.radial_segments,
                closed=wire.closed,
            )
            meshes.append(TubeMesh(wire.name, wire.family, vertices, faces))

        scene = TessellatedScene(meshes, wire_thickness)
        tracer.event(f"Tessellated {len(meshes)} wires", vertices=scene.vertex_count, faces=scene.face_count)
        return scene
