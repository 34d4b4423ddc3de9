"""
Wavefront OBJ export of the tessellated wire tubes.

Each tube becomes a trimesh geometry named after its wire, collected in one
trimesh.Scene and written through trimesh's OBJ exporter. The wire material
is written to a companion MTL file next to the OBJ.
"""

import os

import numpy as np
import trimesh
from trimesh.exchange.obj import export_obj as trimesh_export_obj
from trimesh.visual import TextureVisuals
from trimesh.visual.material import SimpleMaterial

from wirevessel.io.save_artifacts import ensure_dir, save_bytes, save_text
from wirevessel.render.raster import hex_to_rgb
from wirevessel.tracer import get_tracer, trace

MATERIAL_NAME = "wire"
OBJ_HEADER = "wirevessel wire mesh"


def wire_material(color, preset=None):
    """
    SimpleMaterial in the wire colour.

    Metals reflect their own colour; glossiness grows as roughness falls.
    """
    rgba = list(hex_to_rgb(color)) + [255]
    if preset is None:
        return SimpleMaterial(diffuse=rgba, name=MATERIAL_NAME)
    return SimpleMaterial(
        diffuse=rgba,
        ambient=[0, 0, 0, 255],
        specular=rgba,
        glossiness=(1.0 - preset.roughness) * 1000.0,
        name=MATERIAL_NAME,
    )


def scene_to_trimesh(scene, material):
    """
    trimesh.Scene with one geometry per non-empty tube.

    Tubes carry a constant uv so the exporter writes the material reference.
    """
    mesh_scene = trimesh.Scene()
    for mesh in scene.meshes:
        if len(mesh.faces) == 0:
            continue
        geometry = trimesh.Trimesh(
            vertices=mesh.vertices,
            faces=mesh.faces,
            visual=TextureVisuals(uv=np.zeros((len(mesh.vertices), 2)), material=material),
            process=False,
        )
        geometry.metadata["name"] = mesh.name
        mesh_scene.add_geometry(geometry, geom_name=mesh.name)
    return mesh_scene


@trace(label="export_obj")
def export_obj(scene, path, color, preset=None, precision=6):
    """
    Write path (.obj) and its .mtl next to it.

    Returns (obj_path, mtl_path); mtl_path is None when there is no tube to
    carry a material.
    """
    tracer = get_tracer()

    directory = os.path.dirname(path)
    if directory:
        ensure_dir(directory)

    mesh_scene = scene_to_trimesh(scene, wire_material(color, preset))
    if mesh_scene.is_empty:
        save_text(f"# {OBJ_HEADER}\n", path)
        tracer.event("OBJ written without geometry", level="WARN")
        return path, None

    mtl_name = os.path.splitext(os.path.basename(path))[0] + ".mtl"
    text, files = trimesh_export_obj(
        mesh_scene,
        include_normals=False,
        include_color=False,
        return_texture=True,
        digits=precision,
        mtl_name=mtl_name,
        header=OBJ_HEADER,
    )
    save_text(text, path)

    mtl_path = None
    for name, data in files.items():
        file_path = os.path.join(directory, name)
        save_bytes(data, file_path)
        if name.endswith(".mtl"):
            mtl_path = file_path

    tracer.event(f"OBJ written with {len(mesh_scene.geometry)} objects", faces=scene.face_count)
    return path, mtl_path
