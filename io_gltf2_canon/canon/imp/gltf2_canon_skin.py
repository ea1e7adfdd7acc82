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

from ...io.com.gltf2_io_constants import DataType
from ...io.com.gltf2_io_debug import WarningKind
from ...io.imp.gltf2_io_binary import BinaryData
from ..com.gltf2_canon_math import invert_matrix, matrix_gltf_to_canon, trs_to_matrix
from .gltf2_canon_node import scene_roots
from .gltf2_canon_validate import ReferenceValidator


class CanonSkin():
    """Skeleton & Skinning Assembler."""
    def __new__(cls, *args, **kwargs):
        raise RuntimeError("%s should not be instantiated" % cls)

    @staticmethod
    def create_all(gltf):
        gltf.joint_paths = compute_joint_paths(gltf)
        for skin_idx in range(len(gltf.data.skins or [])):
            CanonSkin.create(gltf, skin_idx)

    @staticmethod
    def create(gltf, skin_idx):
        pyskin = gltf.data.skins[skin_idx]
        skeleton = gltf.canon.skeletons[skin_idx]
        skeleton.display_name = pyskin.name or ''
        context = "skin %d (%s)" % (skin_idx, pyskin.name or '')

        valid = []
        for joint_idx in pyskin.joints:
            if not isinstance(joint_idx, int) or not 0 <= joint_idx < len(gltf.data.nodes or []):
                gltf.log.warning(
                    "Skin joint index %s out of bounds (length %d) for %s" %
                    (joint_idx, len(gltf.data.nodes or []), context),
                    WarningKind.Reference
                )
                # Placeholder keeps the joint arrays aligned with the skin
                skeleton.joints.append("bad_index_node_%s" % joint_idx)
                skeleton.joint_names.append("Bad Index Node %s" % joint_idx)
                skeleton.rest_transforms.append(np.identity(4))
                valid.append(False)
                continue

            pynode = gltf.data.nodes[joint_idx]
            token = gltf.joint_paths.get(joint_idx)
            if token is None:
                gltf.log.warning("Joint node %d of %s is not reachable from any scene" % (joint_idx, context),
                                 WarningKind.Reference)
                token = "n%d" % joint_idx

            canon_idx = gltf.node_map.get(joint_idx)
            if canon_idx is not None:
                gltf.canon.nodes[canon_idx].is_joint = True
                rest = local_matrix(gltf.canon.nodes[canon_idx])
            else:
                rest = pynode_matrix(pynode)

            skeleton.joints.append(token)
            skeleton.joint_names.append(pynode.name or token)
            skeleton.rest_transforms.append(rest)
            valid.append(True)

        skeleton.bind_transforms = CanonSkin.bind_transforms(gltf, pyskin, valid, context)

    @staticmethod
    def bind_transforms(gltf, pyskin, valid, context):
        """Inverses of the inverse bind matrices; identity where there is no usable matrix."""
        joint_count = len(pyskin.joints)
        ibms = None
        if pyskin.inverse_bind_matrices is not None:
            if ReferenceValidator.accessor(gltf, pyskin.inverse_bind_matrices, 'inverse bind matrices of %s' % context,
                                           types=[DataType.Mat4], count=joint_count):
                ibms = BinaryData.decode_accessor_float(gltf, pyskin.inverse_bind_matrices)

        binds = []
        for i in range(joint_count):
            if ibms is None or not valid[i]:
                binds.append(np.identity(4))
                continue
            bind, ok = invert_matrix(matrix_gltf_to_canon(ibms[i]))
            if not ok:
                gltf.log.warning("Inverse bind matrix %d of %s is singular" % (i, context), WarningKind.Shape)
            binds.append(bind)
        return binds


def compute_joint_paths(gltf):
    """Maps glTF node index -> hierarchical joint path token ("n0/n3/n4").

    Independent of the node graph traversal, but walks the same roots in the
    same order with its own visited set.
    """
    paths = {}
    visited = set()
    node_count = len(gltf.data.nodes or [])
    for root_idx in scene_roots(gltf):
        stack = [(None, root_idx)]
        while stack:
            parent_path, node_idx = stack.pop()
            if node_idx in visited:
                gltf.log.debug("Node index %s is already named, skipping" % node_idx)
                continue
            visited.add(node_idx)

            path = "n%s" % node_idx
            if parent_path is not None:
                path = parent_path + "/" + path
            paths[node_idx] = path

            if not isinstance(node_idx, int) or not 0 <= node_idx < node_count:
                continue
            for child_idx in reversed(gltf.data.nodes[node_idx].children or []):
                stack.append((path, child_idx))
    return paths


def local_matrix(node):
    if node.has_transform:
        return node.transform.copy()
    return trs_to_matrix(node.translation, node.rotation, node.scale)


def pynode_matrix(pynode):
    """Local matrix of a node the graph builder never reached."""
    if pynode.matrix is not None and len(pynode.matrix) == 16:
        return matrix_gltf_to_canon(pynode.matrix)
    t = pynode.translation if pynode.translation is not None and len(pynode.translation) == 3 else [0, 0, 0]
    r = pynode.rotation if pynode.rotation is not None and len(pynode.rotation) == 4 else [0, 0, 0, 1]
    s = pynode.scale if pynode.scale is not None and len(pynode.scale) == 3 else [1, 1, 1]
    return trs_to_matrix(t, r, s)
