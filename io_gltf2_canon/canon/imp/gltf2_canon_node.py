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

from ...io.com.gltf2_io_debug import WarningKind
from ...io.com.gltf2_io_constants import NGP_EXTENSION_NAME
from ...io.imp.gltf2_io_gltf import ImportError
from ..com.gltf2_canon_model import Node
from ..com.gltf2_canon_math import matrix_gltf_to_canon
from .gltf2_canon_validate import ReferenceValidator
from .gltf2_canon_ngp import CanonNgp


class CanonNode():
    """Node Graph Builder.

    Nodes are numbered in pre-order: a node gets its slot before any of its
    children. `gltf.node_map` maps glTF node index -> canonical node index and
    `gltf.parent_map` maps glTF node index -> glTF parent index (-1 for roots).
    Skinned meshes are bound in a second phase, once both maps are complete.
    """
    def __new__(cls, *args, **kwargs):
        raise RuntimeError("%s should not be instantiated" % cls)

    @staticmethod
    def create_all(gltf):
        """Builds gltf.canon.nodes and returns the canonical root indices."""
        gltf.node_map = {}
        gltf.parent_map = {}
        gltf.skinned_nodes = []

        capacity = len(gltf.data.nodes or [])
        if capacity == 0:
            gltf.log.warning("No nodes in glTF", WarningKind.Reference)
            gltf.canon.root_nodes = []
            return []

        nodes = [Node() for _ in range(capacity)]
        visited = set()
        roots = []
        slots = 0

        for root_idx in scene_roots(gltf):
            slots = CanonNode.traverse(gltf, nodes, slots, root_idx, visited, roots)

        # Slots past the last traversed node stay default nodes
        gltf.canon.nodes = nodes
        gltf.canon.root_nodes = roots

        CanonNode.bind_skinned_meshes(gltf)
        return roots

    @staticmethod
    def traverse(gltf, nodes, slots, root_idx, visited, roots):
        """Depth-first walk from one root. Returns the number of used slots.

        The walk keeps its own stack so that deep hierarchies don't hit the
        interpreter recursion limit; popping children in authored order gives
        the same pre-order numbering as a recursive descent.
        """
        stack = [(-1, root_idx)]
        while stack:
            parent_idx, node_idx = stack.pop()

            if node_idx in visited:
                gltf.log.warning(
                    "Node index %d is already traversed, skipping (child of %s)" % (node_idx, parent_idx),
                    WarningKind.Topology
                )
                continue

            is_valid = ReferenceValidator.node(gltf, node_idx, 'node %d' % parent_idx if parent_idx != -1 else 'scene')
            if not is_valid and parent_idx != -1:
                # Bad child indices are dropped; bad roots keep a placeholder
                continue

            if slots >= len(nodes):
                raise ImportError(
                    "Bad glTF: node %s needs slot %d but only %d nodes are declared" % (node_idx, slots, len(nodes))
                )
            visited.add(node_idx)
            canon_idx = slots
            slots += 1

            gltf.node_map[node_idx] = canon_idx
            gltf.parent_map[node_idx] = parent_idx
            node = nodes[canon_idx]
            if parent_idx != -1:
                node.parent = gltf.node_map[parent_idx]
                nodes[node.parent].children.append(canon_idx)
            else:
                roots.append(canon_idx)

            if not is_valid:
                node.name = "bad_index_node_%s" % node_idx
                node.display_name = "Bad Index Node %s" % node_idx
                continue

            CanonNode.create(gltf, node, node_idx)

            children = gltf.data.nodes[node_idx].children or []
            for child_idx in reversed(children):
                stack.append((node_idx, child_idx))

        return slots

    @staticmethod
    def create(gltf, node, node_idx):
        """Fills a canonical node from the glTF node (everything but hierarchy)."""
        pynode = gltf.data.nodes[node_idx]
        context = "node %d (%s)" % (node_idx, pynode.name or '')

        node.name = "Node_%d" % node_idx
        node.display_name = pynode.name or ''

        node.translation = read_vector(gltf, pynode.translation, 3, [0.0, 0.0, 0.0], 'translation', context)
        node.rotation = read_vector(gltf, pynode.rotation, 4, [0.0, 0.0, 0.0, 1.0], 'rotation', context)
        node.scale = read_vector(gltf, pynode.scale, 3, [1.0, 1.0, 1.0], 'scale', context)
        if np.dot(node.rotation, node.rotation) < 1e-12:
            gltf.log.warning("Degenerate rotation for %s, using identity" % context, WarningKind.Shape)
            node.rotation = np.array([0.0, 0.0, 0.0, 1.0])

        if pynode.matrix is not None:
            if len(pynode.matrix) == 16:
                node.has_transform = True
                node.transform = matrix_gltf_to_canon(pynode.matrix)
            else:
                gltf.log.warning(
                    "Invalid matrix size %d (expected 16) for %s" % (len(pynode.matrix), context),
                    WarningKind.Shape
                )

        if pynode.camera is not None and ReferenceValidator.camera(gltf, pynode.camera, context):
            node.camera = pynode.camera

        light = get_node_light(pynode)
        if light is not None and ReferenceValidator.light(gltf, light, context):
            node.light = light

        if pynode.mesh is not None and ReferenceValidator.mesh(gltf, pynode.mesh, context):
            gltf.mesh_use_count[pynode.mesh] += 1
            if pynode.skin is not None:
                # Bound once the parent map is complete
                gltf.skinned_nodes.append(node_idx)
            else:
                node.static_meshes = list(gltf.mesh_parts[pynode.mesh])

        ngp = (pynode.extensions or {}).get(NGP_EXTENSION_NAME)
        if ngp is not None:
            node.ngp = CanonNgp.create(gltf, ngp, context)

    @staticmethod
    def bind_skinned_meshes(gltf):
        """Attaches skinned meshes to their skeleton root.

        The root is the parent of the skin's skeleton node if the skin names
        one, else the parent of the skinned node, else the skinned node itself.
        """
        for node_idx in gltf.skinned_nodes:
            pynode = gltf.data.nodes[node_idx]
            context = "node %d (%s)" % (node_idx, pynode.name or '')

            if not ReferenceValidator.skin(gltf, pynode.skin, context):
                # Keep the geometry, unskinned
                gltf.canon.nodes[gltf.node_map[node_idx]].static_meshes = list(gltf.mesh_parts[pynode.mesh])
                continue

            pyskin = gltf.data.skins[pynode.skin]
            if pyskin.skeleton is not None:
                parent_idx = gltf.parent_map.get(pyskin.skeleton, -1)
            else:
                parent_idx = gltf.parent_map.get(node_idx, -1)
            skin_root_idx = parent_idx if parent_idx != -1 else node_idx

            if skin_root_idx not in gltf.node_map:
                gltf.log.warning("Could not find canonical node for glTF node %d" % skin_root_idx,
                                 WarningKind.Reference)
                continue
            anchor_idx = gltf.node_map[skin_root_idx]

            skeleton = gltf.canon.skeletons[pynode.skin]
            skeleton.parent = anchor_idx
            anchor = gltf.canon.nodes[anchor_idx]
            if pynode.skin not in anchor.skeletons:
                anchor.skeletons.append(pynode.skin)

            for mesh_part in gltf.mesh_parts[pynode.mesh]:
                if mesh_part not in skeleton.mesh_skinning_targets:
                    skeleton.mesh_skinning_targets.append(mesh_part)


def scene_roots(gltf):
    """Roots of every scene, in order. Without scenes, every parentless node is a root."""
    if gltf.data.scenes:
        return [idx for scene in gltf.data.scenes for idx in scene.nodes]

    children = set()
    for pynode in gltf.data.nodes or []:
        children.update(pynode.children or [])
    return [idx for idx in range(len(gltf.data.nodes or [])) if idx not in children]


def get_node_light(pynode):
    ext = (pynode.extensions or {}).get('KHR_lights_punctual')
    if not isinstance(ext, dict):
        return None
    return ext.get('light')


def read_vector(gltf, value, size, default, what, context):
    if value is None:
        return np.array(default, dtype=np.float64)
    if len(value) != size:
        gltf.log.warning(
            "Invalid %s size %d (expected %d) for %s" % (what, len(value), size, context),
            WarningKind.Shape
        )
        return np.array(default, dtype=np.float64)
    return np.array(value, dtype=np.float64)
