# Copyright 2018-2021 The glTF-Blender-IO authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import numpy as np

from ...io.imp.gltf2_io_binary import BinaryData
from ...io.com.gltf2_io_constants import DataType, PrimitiveMode, MAX_JOINT_WEIGHT_SETS
from ...io.com.gltf2_io_debug import WarningKind
from ..com.gltf2_canon_model import Mesh
from .gltf2_canon_validate import ReferenceValidator


class CanonMesh():
    """Mesh Primitive Normalizer. One canonical mesh per glTF primitive."""
    def __new__(cls, *args, **kwargs):
        raise RuntimeError("%s should not be instantiated" % cls)

    @staticmethod
    def create_all(gltf):
        gltf.mesh_parts = []
        gltf.mesh_use_count = []
        for mesh_idx, pymesh in enumerate(gltf.data.meshes or []):
            parts = []
            for prim_idx in range(len(pymesh.primitives)):
                parts.append(CanonMesh.create(gltf, mesh_idx, prim_idx))
            gltf.mesh_parts.append(parts)
            gltf.mesh_use_count.append(0)

        # Accessors are cached in case they are shared between primitives;
        # clear the cache now that all prims are done.
        gltf.decode_accessor_cache = {}

    @staticmethod
    def create(gltf, mesh_idx, prim_idx):
        """Returns the index of the new canonical mesh. The slot is always
        allocated, even when the primitive can't be read.
        """
        pymesh = gltf.data.meshes[mesh_idx]
        prim = pymesh.primitives[prim_idx]

        mesh = Mesh()
        gltf.canon.meshes.append(mesh)
        canon_idx = len(gltf.canon.meshes) - 1

        name = pymesh.name or "Mesh%d" % mesh_idx
        context = "mesh '%s' primitive %d" % (name, prim_idx)

        if prim.targets:
            gltf.log.warning("Morph targets of %s are not imported" % context, WarningKind.Unsupported)

        pos_idx = prim.attributes.get('POSITION')
        if pos_idx is None:
            gltf.log.warning("%s has no POSITION attribute" % context, WarningKind.Reference)
            return canon_idx
        if not ReferenceValidator.accessor(gltf, pos_idx, context, types=[DataType.Vec3]):
            return canon_idx
        vertex_count = gltf.data.accessors[pos_idx].count

        if prim.indices is not None:
            if not ReferenceValidator.accessor(gltf, prim.indices, context, types=[DataType.Scalar]):
                return canon_idx
            indices = BinaryData.decode_accessor(gltf, prim.indices)
            indices = indices.reshape(len(indices)).astype(np.int64)
            # Out of range indices leave the mesh empty
            if len(indices) and indices.max() >= vertex_count:
                gltf.log.warning(
                    "Mesh '%s' primitive %d has indices (max %d) exceeding vertex count (%d). "
                    "Creating empty mesh." % (name, prim_idx, indices.max(), vertex_count),
                    WarningKind.Reference
                )
                return canon_idx
        else:
            indices = np.arange(0, vertex_count, dtype=np.int64)

        mesh.display_name = name
        if len(pymesh.primitives) > 1:
            mesh.display_name = "%s_primitive%d" % (name, prim_idx)

        mesh.points = np.array(BinaryData.decode_accessor_float(gltf, pos_idx, cache=True), dtype=np.float32)

        mesh.normals = read_attribute(gltf, prim, 'NORMAL', [DataType.Vec3], vertex_count, context)
        mesh.tangents = read_attribute(gltf, prim, 'TANGENT', [DataType.Vec4], vertex_count, context)
        if mesh.tangents is not None and gltf.import_settings['compute_bitangents']:
            if mesh.normals is not None:
                mesh.bitangents = compute_bitangents(gltf, mesh.normals, mesh.tangents)
            else:
                gltf.log.warning("%s has tangents but no normals; skipping bitangents" % context,
                                 WarningKind.Shape)

        read_uvs(gltf, prim, mesh, vertex_count, context)

        mode = PrimitiveMode.Triangles if prim.mode is None else prim.mode
        mesh.indices = triangulate(gltf, mode, indices)
        mesh.faces = np.full(len(mesh.indices) // 3, 3, dtype=np.int64)

        read_joints_weights(gltf, prim, mesh, vertex_count, context)
        read_colors(gltf, prim, mesh, vertex_count, context)

        if prim.material is not None and ReferenceValidator.material(gltf, prim.material, context):
            mesh.double_sided = bool(gltf.data.materials[prim.material].double_sided)
            if gltf.import_settings['import_materials']:
                mesh.material = prim.material

        return canon_idx

    @staticmethod
    def check_instancing(gltf):
        """Meshes used by several nodes are flagged instanceable."""
        for mesh_idx, use_count in enumerate(gltf.mesh_use_count):
            if use_count > 1:
                for canon_idx in gltf.mesh_parts[mesh_idx]:
                    gltf.canon.meshes[canon_idx].instanceable = True
            elif use_count == 0:
                pymesh = gltf.data.meshes[mesh_idx]
                gltf.log.warning("Mesh %d (%s) appears to be unused" % (mesh_idx, pymesh.name or ''),
                                 WarningKind.Reference)


def read_attribute(gltf, prim, attribute, types, vertex_count, context):
    """Float32 copy of a vertex attribute, or None if absent or unusable."""
    accessor_idx = prim.attributes.get(attribute)
    if accessor_idx is None:
        return None
    if not ReferenceValidator.accessor(gltf, accessor_idx, '%s of %s' % (attribute, context), types=types):
        return None
    if gltf.data.accessors[accessor_idx].count != vertex_count:
        gltf.log.warning(
            "%s of %s has %d elements for %d vertices" %
            (attribute, context, gltf.data.accessors[accessor_idx].count, vertex_count),
            WarningKind.Shape
        )
        return None
    return np.array(BinaryData.decode_accessor_float(gltf, accessor_idx, cache=True), dtype=np.float32)


def compute_bitangents(gltf, normals, tangents):
    # Bitangent = cross(normal, tangent.xyz) * tangent.w
    handedness = tangents[:, 3]
    bad = np.abs(handedness) < 0.5
    if np.any(bad):
        gltf.log.warning("Invalid handedness value in %d tangents, assuming +1" % np.count_nonzero(bad),
                         WarningKind.Shape)
    handedness = np.where(bad | (handedness >= 0.0), 1.0, -1.0).astype(np.float32)
    return np.cross(normals, tangents[:, :3]) * handedness[:, None]


def uvs_gltf_to_canon(uvs):
    # u,v -> u,1-v
    uvs[:, 1] *= -1
    uvs[:, 1] += 1


def read_uvs(gltf, prim, mesh, vertex_count, context):
    mesh.uvs = read_attribute(gltf, prim, 'TEXCOORD_0', [DataType.Vec2], vertex_count, context)
    if mesh.uvs is None:
        return

    uv_sets = [mesh.uvs]
    i = 1
    while ('TEXCOORD_%d' % i) in prim.attributes:
        uvs = read_attribute(gltf, prim, 'TEXCOORD_%d' % i, [DataType.Vec2], vertex_count, context)
        if uvs is None:
            # Later sets would be renumbered
            break
        mesh.extra_uv_sets.append(uvs)
        uv_sets.append(uvs)
        i += 1

    if gltf.import_settings['flip_uvs']:
        for uvs in uv_sets:
            uvs_gltf_to_canon(uvs)


def triangulate(gltf, mode, indices):
    """Flat triangle list for the triangle modes. Point and line indices pass through."""
    if mode == PrimitiveMode.Triangles:
        # TRIANGLES
        #   2     3
        #  / \   / \
        # 0---1 4---5
        extra = len(indices) % 3
        if extra != 0:
            gltf.log.warning(
                "TRIANGLES primitive has %d indices, not a multiple of 3; dropping the last %d" % (len(indices), extra),
                WarningKind.Shape
            )
            indices = indices[:len(indices) - extra]
        return indices

    if mode == PrimitiveMode.TriangleStrip:
        # TRIANGLE STRIP
        # 0---2---4
        #  \ / \ /
        #   1---3
        if len(indices) < 3:
            gltf.log.warning("TRIANGLE_STRIP primitive has fewer than 3 indices", WarningKind.Shape)
            return np.empty(0, dtype=np.int64)
        i = np.arange(len(indices) - 2)
        odd = i % 2
        tris = np.stack([indices[i], indices[i + 1 + odd], indices[i + 2 - odd]], axis=1)
        return squish(tris)

    if mode == PrimitiveMode.TriangleFan:
        # TRIANGLE FAN
        #   3---2
        #  / \ / \
        # 4---0---1
        if len(indices) < 3:
            gltf.log.warning("TRIANGLE_FAN primitive has fewer than 3 indices", WarningKind.Shape)
            return np.empty(0, dtype=np.int64)
        i = np.arange(1, len(indices) - 1)
        tris = np.stack([np.full(len(i), indices[0]), indices[i], indices[i + 1]], axis=1)
        return squish(tris)

    gltf.log.warning("Encountered glTF primitive with unsupported mode %s" % mode, WarningKind.Unsupported)
    return indices


def squish(array):
    """Squish nD array into 1D array."""
    return array.reshape(array.size)


def read_joints_weights(gltf, prim, mesh, vertex_count, context):
    """Interleaves up to MAX_JOINT_WEIGHT_SETS sets into one block of
    4 * num_sets influences per vertex, preserving set order.
    """
    if 'JOINTS_0' not in prim.attributes and 'WEIGHTS_0' not in prim.attributes:
        return

    num_sets = 0
    while num_sets < MAX_JOINT_WEIGHT_SETS and ('JOINTS_%d' % num_sets) in prim.attributes:
        num_sets += 1
    num_sets = max(num_sets, 1)

    joint_sets = []
    weight_sets = []
    for i in range(num_sets):
        joints_idx = prim.attributes.get('JOINTS_%d' % i)
        weights_idx = prim.attributes.get('WEIGHTS_%d' % i)
        if joints_idx is None or weights_idx is None:
            gltf.log.warning("Mismatch number of joint indices and weights for %s" % context, WarningKind.Shape)
            return
        if not ReferenceValidator.accessor(gltf, joints_idx, 'JOINTS_%d of %s' % (i, context),
                                           types=[DataType.Vec4]):
            return
        if not ReferenceValidator.accessor(gltf, weights_idx, 'WEIGHTS_%d of %s' % (i, context),
                                           types=[DataType.Vec4]):
            return
        joint_count = gltf.data.accessors[joints_idx].count
        weight_count = gltf.data.accessors[weights_idx].count
        if joint_count != weight_count or joint_count != vertex_count:
            gltf.log.warning("Mismatch number of joint indices and weights for %s" % context, WarningKind.Shape)
            return
        joint_sets.append(BinaryData.decode_accessor(gltf, joints_idx, cache=True).astype(np.int32))
        weight_sets.append(BinaryData.decode_accessor_float(gltf, weights_idx, cache=True))

    if vertex_count == 0:
        return

    mesh.joints = squish(np.concatenate(joint_sets, axis=1))
    mesh.weights = squish(np.concatenate(weight_sets, axis=1).astype(np.float32))
    mesh.influence_count = 4 * num_sets
    mesh.is_rigid = False


def read_colors(gltf, prim, mesh, vertex_count, context):
    """COLOR_0 is split into a color and an opacity set."""
    cols = read_attribute(gltf, prim, 'COLOR_0', [DataType.Vec3, DataType.Vec4], vertex_count, context)
    if cols is None or len(cols) == 0:
        return
    mesh.colors = np.ascontiguousarray(cols[:, :3])
    if cols.shape[1] == 4:
        mesh.opacities = np.ascontiguousarray(cols[:, 3])
