"""
glTF 2.0 Export for Spacetime Structures

Turns a Voxels cloud into a self-contained .gltf document: every voxel is a
unit cube, all cubes share one mesh with per-vertex colors, and the binary
payload is embedded as a base64 data URI.
"""

import base64
import json

import numpy as np

DEFAULT_FILENAME = "spacetime_structure.gltf"

_FLOAT = 5126
_UINT = 5125
_ARRAY_BUFFER = 34962
_ELEMENT_ARRAY_BUFFER = 34963
_TRIANGLES = 4

# Unit cube centered on the voxel position.
_CORNERS = np.array([
    [-0.5, -0.5, -0.5], [0.5, -0.5, -0.5], [0.5, 0.5, -0.5], [-0.5, 0.5, -0.5],
    [-0.5, -0.5, 0.5], [0.5, -0.5, 0.5], [0.5, 0.5, 0.5], [-0.5, 0.5, 0.5],
], dtype=np.float32)

# Counter-clockwise when seen from outside.
_TRIANGLE_INDICES = np.array([
    [0, 2, 1], [0, 3, 2],   # back (-z)
    [4, 5, 6], [4, 6, 7],   # front (+z)
    [0, 1, 5], [0, 5, 4],   # bottom (-y)
    [3, 7, 6], [3, 6, 2],   # top (+y)
    [0, 4, 7], [0, 7, 3],   # left (-x)
    [1, 2, 6], [1, 6, 5],   # right (+x)
], dtype=np.uint32)


def srgb_to_linear(rgb):
    """glTF vertex colors are linear; voxel colors are sRGB."""
    rgb = np.asarray(rgb, dtype=np.float32)
    return np.where(rgb <= 0.04045, rgb / 12.92, ((rgb + 0.055) / 1.055) ** 2.4).astype(np.float32)


def _cube_mesh(voxels):
    n = len(voxels)
    vertices = (voxels.positions[:, None, :] + _CORNERS[None, :, :]).reshape(-1, 3)
    colors = np.repeat(srgb_to_linear(voxels.colors), len(_CORNERS), axis=0)
    offsets = (np.arange(n, dtype=np.uint32) * len(_CORNERS))[:, None, None]
    indices = (_TRIANGLE_INDICES[None, :, :] + offsets).reshape(-1)
    return vertices.astype(np.float32), colors, indices.astype(np.uint32)


def build_gltf(voxels, name="spacetime_structure"):
    """Return a glTF 2.0 document (a JSON-ready dict) for the voxel cloud."""
    doc = {
        "asset": {"version": "2.0", "generator": "lattice_trace"},
        "scene": 0,
        "scenes": [{"nodes": [0]}],
        "nodes": [{"name": name}],
    }
    if len(voxels) == 0:
        return doc

    vertices, colors, indices = _cube_mesh(voxels)
    chunks = [vertices.tobytes(), colors.tobytes(), indices.tobytes()]
    payload = b"".join(chunks)

    views = []
    offset = 0
    for chunk, target in zip(chunks, (_ARRAY_BUFFER, _ARRAY_BUFFER, _ELEMENT_ARRAY_BUFFER)):
        views.append({
            "buffer": 0,
            "byteOffset": offset,
            "byteLength": len(chunk),
            "target": target,
        })
        offset += len(chunk)

    doc["nodes"][0]["mesh"] = 0
    doc["meshes"] = [{
        "name": name,
        "primitives": [{
            "attributes": {"POSITION": 0, "COLOR_0": 1},
            "indices": 2,
            "material": 0,
            "mode": _TRIANGLES,
        }],
    }]
    doc["materials"] = [{
        "name": "voxel",
        "doubleSided": True,
        "pbrMetallicRoughness": {
            "baseColorFactor": [1.0, 1.0, 1.0, 1.0],
            "metallicFactor": 0.0,
            "roughnessFactor": 1.0,
        },
    }]
    doc["accessors"] = [
        {
            "bufferView": 0,
            "componentType": _FLOAT,
            "count": len(vertices),
            "type": "VEC3",
            "min": vertices.min(axis=0).tolist(),
            "max": vertices.max(axis=0).tolist(),
        },
        {
            "bufferView": 1,
            "componentType": _FLOAT,
            "count": len(colors),
            "type": "VEC3",
        },
        {
            "bufferView": 2,
            "componentType": _UINT,
            "count": len(indices),
            "type": "SCALAR",
        },
    ]
    doc["bufferViews"] = views
    doc["buffers"] = [{
        "byteLength": len(payload),
        "uri": "data:application/octet-stream;base64,"
               + base64.b64encode(payload).decode("ascii"),
    }]
    return doc


def save_gltf(voxels, path):
    """Write the voxel cloud to path as indented glTF JSON. Returns path."""
    with open(path, "w") as f:
        json.dump(build_gltf(voxels), f, indent=2)
    return path
