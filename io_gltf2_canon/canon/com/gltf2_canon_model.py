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

"""Canonical, renderer-agnostic scene model filled in by the importer."""

import numpy as np


def identity():
    return np.identity(4, dtype=np.float64)


#
# Material inputs
#

class Channel:
    R = 'r'
    G = 'g'
    B = 'b'
    A = 'a'
    RGB = 'rgb'


class Colorspace:
    Raw = 'raw'
    SRGB = 'sRGB'


class Wrap:
    Repeat = 'repeat'
    Clamp = 'clamp'
    Mirror = 'mirror'


class Filter:
    Nearest = 'nearest'
    Linear = 'linear'
    NearestMipmapNearest = 'nearestMipmapNearest'
    LinearMipmapNearest = 'linearMipmapNearest'
    NearestMipmapLinear = 'nearestMipmapLinear'
    LinearMipmapLinear = 'linearMipmapLinear'


class EmptyInput:
    """An unset channel. Writers must not emit it."""

    def __eq__(self, other):
        return isinstance(other, EmptyInput)

    def __repr__(self):
        return 'EmptyInput()'


class ConstantInput:
    """A channel holding a scalar or a vector constant."""

    def __init__(self, value):
        self.value = value

    def __eq__(self, other):
        return isinstance(other, ConstantInput) and _values_equal(self.value, other.value)

    def __repr__(self):
        return 'ConstantInput(%r)' % (self.value,)


class TextureInput:
    """A channel read from an image.

    `scale` and `bias` are applied after sampling, as `sample * scale + bias`.
    UV rotation is in degrees.
    """

    def __init__(self, image, uv_index=0, channel=Channel.RGB, colorspace=None):
        self.image = image
        self.uv_index = uv_index
        self.channel = channel
        self.colorspace = colorspace
        self.wrap_s = Wrap.Repeat
        self.wrap_t = Wrap.Repeat
        self.min_filter = Filter.Linear
        self.mag_filter = Filter.Linear
        self.uv_rotation = 0.0
        self.uv_scale = (1.0, 1.0)
        self.uv_translation = (0.0, 0.0)
        self.scale = (1.0, 1.0, 1.0, 1.0)
        self.bias = (0.0, 0.0, 0.0, 0.0)

    def copy(self):
        other = TextureInput(self.image, self.uv_index, self.channel, self.colorspace)
        other.__dict__.update(self.__dict__)
        return other

    def __eq__(self, other):
        return isinstance(other, TextureInput) and self.__dict__ == other.__dict__

    def __repr__(self):
        return 'TextureInput(image=%d, channel=%s, colorspace=%s)' % (self.image, self.channel, self.colorspace)


def _values_equal(a, b):
    return np.array_equal(np.asarray(a), np.asarray(b))


def is_input_used(input):
    """A channel is used iff it reads a valid image or holds a constant."""
    if isinstance(input, TextureInput):
        return input.image >= 0
    return isinstance(input, ConstantInput)


MATERIAL_CHANNELS = [
    'diffuse_color',
    'emissive_color',
    'specular_color',
    'metallic',
    'roughness',
    'specular_level',
    'clearcoat',
    'clearcoat_color',
    'clearcoat_roughness',
    'clearcoat_ior',
    'clearcoat_specular',
    'clearcoat_normal',
    'sheen_color',
    'sheen_roughness',
    'transmission',
    'absorption_color',
    'absorption_distance',
    'scattering_color',
    'scattering_distance',
    'scattering_distance_scale',
    'volume_thickness',
    'opacity',
    'opacity_threshold',
    'ior',
    'normal',
    'normal_scale',
    'occlusion',
    'displacement',
]


class Material:
    def __init__(self, display_name=''):
        self.display_name = display_name
        for channel in MATERIAL_CHANNELS:
            setattr(self, channel, EmptyInput())
        self.is_unlit = False
        self.clearcoat_models_transmission_tint = False

    def used_channels(self):
        return [c for c in MATERIAL_CHANNELS if is_input_used(getattr(self, c))]


#
# Images
#

class ImageFormat:
    Png = 'png'
    Jpg = 'jpg'
    Webp = 'webp'


class Image:
    def __init__(self):
        self.name = ''
        self.uri = ''
        self.format = None
        self.data = None


#
# Geometry
#

class Mesh:
    def __init__(self):
        self.display_name = ''
        self.points = np.empty((0, 3), dtype=np.float32)
        self.normals = None
        self.tangents = None
        self.bitangents = None
        self.uvs = None
        self.extra_uv_sets = []
        self.indices = np.empty(0, dtype=np.int64)
        self.faces = np.empty(0, dtype=np.int64)
        self.joints = None
        self.weights = None
        self.influence_count = 0
        self.is_rigid = True
        self.colors = None
        self.opacities = None
        self.material = -1
        self.double_sided = False
        self.instanceable = False

    def is_empty(self):
        return len(self.points) == 0


#
# Hierarchy
#

class Node:
    def __init__(self):
        self.name = ''
        self.display_name = ''
        self.translation = np.zeros(3)
        self.rotation = np.array([0.0, 0.0, 0.0, 1.0])  # x, y, z, w
        self.scale = np.ones(3)
        self.has_transform = False
        self.transform = identity()
        self.parent = -1
        self.children = []
        self.camera = None
        self.light = None
        self.static_meshes = []
        self.skeletons = []
        self.is_joint = False
        self.ngp = None
        self.animations = []


class Skeleton:
    def __init__(self):
        self.display_name = ''
        self.joints = []
        self.joint_names = []
        self.rest_transforms = []
        self.bind_transforms = []
        self.parent = -1
        self.mesh_skinning_targets = []
        self.animated_joints = []
        self.skeleton_animations = []


#
# Animation
#

class TimeValues:
    def __init__(self, times=None, values=None, interpolation='LINEAR'):
        self.times = np.empty(0, dtype=np.float32) if times is None else times
        self.values = np.empty(0, dtype=np.float32) if values is None else values
        self.interpolation = interpolation

    def __len__(self):
        return len(self.times)


class NodeAnimation:
    def __init__(self):
        self.translations = TimeValues()
        self.rotations = TimeValues()
        self.scales = TimeValues()


class SkeletonAnimation:
    def __init__(self):
        self.times = np.empty(0, dtype=np.float32)
        self.translations = np.empty((0, 0, 3), dtype=np.float32)
        self.rotations = np.empty((0, 0, 4), dtype=np.float32)
        self.scales = np.empty((0, 0, 3), dtype=np.float32)


class AnimationTrack:
    def __init__(self, display_name=''):
        self.display_name = display_name
        self.min_time = float('inf')
        self.max_time = float('-inf')
        self.has_timepoints = False


#
# Cameras, lights, neural primitives
#

class Camera:
    Perspective = 'perspective'
    Orthographic = 'orthographic'

    def __init__(self):
        self.display_name = ''
        self.projection = Camera.Perspective
        self.near_z = 0.0
        self.far_z = None
        self.fov = 0.0
        self.aspect_ratio = 1.0
        self.f = 0.0
        self.horizontal_aperture = 0.0
        self.vertical_aperture = 0.0


class LightType:
    Sun = 'sun'
    Sphere = 'sphere'
    Disk = 'disk'


class Light:
    def __init__(self):
        self.display_name = ''
        self.type = LightType.Sphere
        self.color = (1.0, 1.0, 1.0)
        self.intensity = 1.0
        self.radius = 0.0
        self.cone_angle = None
        self.cone_falloff = None


class NgpData:
    def __init__(self):
        self.density_mlp_layer0_weight = None
        self.density_mlp_layer0_bias = None
        self.density_mlp_layer1_weight = None
        self.density_mlp_layer1_bias = None
        self.color_mlp_layer0_weight = None
        self.color_mlp_layer0_bias = None
        self.color_mlp_layer1_weight = None
        self.color_mlp_layer1_bias = None
        self.color_mlp_layer2_weight = None
        self.color_mlp_layer2_bias = None
        self.density_grid = None
        self.distance_grid = None
        self.hash_grid = None
        self.density_threshold = None
        self.hash_grid_resolution = []
        self.has_transform = False
        self.transform = identity()


class CanonicalScene:
    """Everything produced by one import."""

    def __init__(self):
        self.nodes = []
        self.root_nodes = []
        self.skeletons = []
        self.animation_tracks = []
        self.materials = []
        self.images = []
        self.meshes = []
        self.cameras = []
        self.lights = []
        self.ngps = []
        self.metadata = {}
        self.has_animations = False

        self.doc = 'io_gltf2_canon'
        self.up_axis = 'Y'
        self.meters_per_unit = 1.0
        # glTF time is in seconds
        self.time_codes_per_second = 1.0
