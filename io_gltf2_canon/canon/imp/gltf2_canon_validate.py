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

from ...io.com.gltf2_io_constants import ComponentType, DataType
from ...io.com.gltf2_io_debug import WarningKind


def get_lights(gltf):
    """The KHR_lights_punctual light list of the document, or []."""
    ext = (gltf.data.extensions or {}).get('KHR_lights_punctual', {})
    lights = ext.get('lights', []) if isinstance(ext, dict) else []
    return lights if isinstance(lights, list) else []


class ReferenceValidator():
    """Bounds and type checks on indices into the glTF document.

    Every check returns a bool. A failed check records a REFERENCE warning;
    callers then skip or default the field that held the index.
    """
    def __new__(cls, *args, **kwargs):
        raise RuntimeError("%s should not be instantiated" % cls)

    @staticmethod
    def check_index(gltf, collection, idx, what, context=''):
        length = len(collection or [])
        if isinstance(idx, int) and not isinstance(idx, bool) and 0 <= idx < length:
            return True
        msg = "%s index %s out of bounds (length %d)" % (what, idx, length)
        if context:
            msg += " for %s" % context
        gltf.log.warning(msg, WarningKind.Reference)
        return False

    @staticmethod
    def node(gltf, idx, context=''):
        return ReferenceValidator.check_index(gltf, gltf.data.nodes, idx, 'Node', context)

    @staticmethod
    def mesh(gltf, idx, context=''):
        return ReferenceValidator.check_index(gltf, gltf.data.meshes, idx, 'Mesh', context)

    @staticmethod
    def skin(gltf, idx, context=''):
        return ReferenceValidator.check_index(gltf, gltf.data.skins, idx, 'Skin', context)

    @staticmethod
    def material(gltf, idx, context=''):
        return ReferenceValidator.check_index(gltf, gltf.data.materials, idx, 'Material', context)

    @staticmethod
    def image(gltf, idx, context=''):
        return ReferenceValidator.check_index(gltf, gltf.data.images, idx, 'Image', context)

    @staticmethod
    def texture(gltf, idx, context=''):
        return ReferenceValidator.check_index(gltf, gltf.data.textures, idx, 'Texture', context)

    @staticmethod
    def sampler(gltf, idx, context=''):
        return ReferenceValidator.check_index(gltf, gltf.data.samplers, idx, 'Sampler', context)

    @staticmethod
    def camera(gltf, idx, context=''):
        return ReferenceValidator.check_index(gltf, gltf.data.cameras, idx, 'Camera', context)

    @staticmethod
    def light(gltf, idx, context=''):
        return ReferenceValidator.check_index(gltf, get_lights(gltf), idx, 'Light', context)

    @staticmethod
    def accessor(gltf, idx, context='', types=None, count=None):
        """Checks an accessor index and, optionally, its element type and count."""
        if not ReferenceValidator.check_index(gltf, gltf.data.accessors, idx, 'Accessor', context):
            return False

        accessor = gltf.data.accessors[idx]
        suffix = " for %s" % context if context else ''
        if not DataType.is_valid(accessor.type) or accessor.type in [DataType.Mat2, DataType.Mat3]:
            gltf.log.warning("Accessor %d has unsupported type %s%s" % (idx, accessor.type, suffix),
                             WarningKind.Reference)
            return False
        if not ComponentType.is_valid(accessor.component_type):
            gltf.log.warning("Accessor %d has invalid component type %s%s" % (idx, accessor.component_type, suffix),
                             WarningKind.Reference)
            return False
        if types is not None and accessor.type not in types:
            gltf.log.warning(
                "Accessor %d has invalid type %s (expected %s)%s" % (idx, accessor.type, '/'.join(types), suffix),
                WarningKind.Reference
            )
            return False
        if count is not None and accessor.count != count:
            gltf.log.warning(
                "Accessor %d count %d does not match expected count %d%s" % (idx, accessor.count, count, suffix),
                WarningKind.Shape
            )
            return False
        if accessor.buffer_view is not None and \
                not ReferenceValidator.check_index(gltf, gltf.data.buffer_views, accessor.buffer_view,
                                                   'BufferView', 'accessor %d' % idx):
            return False
        if accessor.buffer_view is not None:
            buffer_idx = gltf.data.buffer_views[accessor.buffer_view].buffer
            if not ReferenceValidator.check_index(gltf, gltf.data.buffers, buffer_idx, 'Buffer',
                                                  'bufferView %d' % accessor.buffer_view):
                return False
        if accessor.sparse is not None:
            for view in [accessor.sparse.indices.buffer_view, accessor.sparse.values.buffer_view]:
                if not ReferenceValidator.check_index(gltf, gltf.data.buffer_views, view, 'BufferView',
                                                      'sparse accessor %d' % idx):
                    return False
        return True
