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

from os.path import basename

from ... import get_version_string
from ..com.gltf2_canon_model import CanonicalScene, Skeleton
from .gltf2_canon_animation import CanonAnimation
from .gltf2_canon_animation_skeleton import CanonSkeletonAnimation
from .gltf2_canon_camera import CanonCamera
from .gltf2_canon_light import CanonLight
from .gltf2_canon_material import CanonMaterial
from .gltf2_canon_mesh import CanonMesh
from .gltf2_canon_node import CanonNode
from .gltf2_canon_skin import CanonSkin


class CanonGlTF():
    """Main glTF import class."""
    def __new__(cls, *args, **kwargs):
        raise RuntimeError("%s should not be instantiated" % cls)

    @staticmethod
    def create(gltf):
        """Fills gltf.canon. Every stage completes before the next one starts."""
        CanonGlTF.pre_compute(gltf)

        CanonGlTF.create_metadata(gltf)
        CanonCamera.create_all(gltf)

        if gltf.import_settings['import_materials']:
            CanonMaterial.create_all(gltf)

        if gltf.import_settings['import_geometry']:
            CanonLight.create_all(gltf)
            CanonMesh.create_all(gltf)

            # Nodes bind skinned meshes to skeletons, so the slots must exist first
            gltf.canon.skeletons = [Skeleton() for _ in gltf.data.skins or []]
            CanonNode.create_all(gltf)
            CanonSkin.create_all(gltf)

            CanonAnimation.create_tracks(gltf)
            CanonAnimation.create_all(gltf)
            CanonSkeletonAnimation.create_all(gltf)

            CanonMesh.check_instancing(gltf)

        gltf.canon.metadata['filenames'] = unique(gltf.filenames)
        return gltf.canon

    @staticmethod
    def pre_compute(gltf):
        """Pre compute, just before creation."""
        gltf.canon = CanonicalScene()

        # texture index -> canonical image index (-1 once it failed)
        gltf.texture_image_cache = {}
        gltf.image_names = set()

        gltf.mesh_parts = []
        gltf.mesh_use_count = []
        gltf.node_map = {}
        gltf.parent_map = {}
        gltf.skinned_nodes = []
        gltf.joint_paths = {}

        gltf.filenames = [basename(gltf.filename)]
        for pybuffer in gltf.data.buffers or []:
            if pybuffer.uri and not pybuffer.uri.startswith('data:'):
                gltf.filenames.append(pybuffer.uri)

    @staticmethod
    def create_metadata(gltf):
        asset = gltf.data.asset
        metadata = gltf.canon.metadata

        metadata['version'] = asset.version
        if isinstance(asset.extras, dict):
            for key, value in asset.extras.items():
                metadata[key] = value

        # 'generator' may be in asset.generator or asset.extras; the former wins
        gltf_generator = asset.generator
        if not gltf_generator and isinstance(asset.extras, dict) and isinstance(asset.extras.get('generator'), str):
            gltf_generator = asset.extras['generator']
        generator = "io_gltf2_canon %s" % get_version_string()
        if gltf_generator:
            generator += "; glTF generator: " + gltf_generator
        metadata['generator'] = generator

        if asset.copyright:
            metadata['copyright'] = asset.copyright


def unique(items):
    result = []
    for item in items:
        if item not in result:
            result.append(item)
    return result
