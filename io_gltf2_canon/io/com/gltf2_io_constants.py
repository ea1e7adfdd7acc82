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

class ComponentType:
    Byte = 5120
    UnsignedByte = 5121
    Short = 5122
    UnsignedShort = 5123
    UnsignedInt = 5125
    Float = 5126

    @classmethod
    def to_numpy_dtype(cls, component_type):
        return {
            ComponentType.Byte: np.int8,
            ComponentType.UnsignedByte: np.uint8,
            ComponentType.Short: np.int16,
            ComponentType.UnsignedShort: np.uint16,
            ComponentType.UnsignedInt: np.uint32,
            ComponentType.Float: np.float32,
        }[component_type]

    @classmethod
    def get_size(cls, component_type):
        return {
            ComponentType.Byte: 1,
            ComponentType.UnsignedByte: 1,
            ComponentType.Short: 2,
            ComponentType.UnsignedShort: 2,
            ComponentType.UnsignedInt: 4,
            ComponentType.Float: 4
        }[component_type]

    @classmethod
    def is_valid(cls, component_type):
        return component_type in (cls.Byte, cls.UnsignedByte, cls.Short, cls.UnsignedShort,
                                  cls.UnsignedInt, cls.Float)

class DataType:
    Scalar = "SCALAR"
    Vec2 = "VEC2"
    Vec3 = "VEC3"
    Vec4 = "VEC4"
    Mat2 = "MAT2"
    Mat3 = "MAT3"
    Mat4 = "MAT4"

    def __new__(cls, *args, **kwargs):
        raise RuntimeError("{} should not be instantiated".format(cls.__name__))

    @classmethod
    def num_elements(cls, data_type):
        return {
            DataType.Scalar: 1,
            DataType.Vec2: 2,
            DataType.Vec3: 3,
            DataType.Vec4: 4,
            DataType.Mat2: 4,
            DataType.Mat3: 9,
            DataType.Mat4: 16
        }[data_type]

    @classmethod
    def is_valid(cls, data_type):
        return data_type in (cls.Scalar, cls.Vec2, cls.Vec3, cls.Vec4, cls.Mat2, cls.Mat3, cls.Mat4)

class PrimitiveMode:
    Points = 0
    Lines = 1
    LineLoop = 2
    LineStrip = 3
    Triangles = 4
    TriangleStrip = 5
    TriangleFan = 6

class TextureFilter:
    Nearest = 9728
    Linear = 9729
    NearestMipmapNearest = 9984
    LinearMipmapNearest = 9985
    NearestMipmapLinear = 9986
    LinearMipmapLinear = 9987

class TextureWrap:
    ClampToEdge = 33071
    MirroredRepeat = 33648
    Repeat = 10497


GLTF_VERSION = "2.0"
GLTF_IOR = 1.5

# Maximum number of JOINTS_n / WEIGHTS_n attribute pairs read from a primitive
MAX_JOINT_WEIGHT_SETS = 8

# Node extension carrying neural graphics primitive payloads
NGP_EXTENSION_NAME = 'ADOBE_nerf_ngp'

# Light conversion. Canonical lights emit over their surface, glTF lights are
# punctual, so a small default radius is assumed.
DEFAULT_POINT_LIGHT_RADIUS = 0.01
DEFAULT_SPOT_LIGHT_RADIUS = 0.01
DIRECTIONAL_LIGHT_INTENSITY_MULT = 1.0
POINT_LIGHT_INTENSITY_MULT = 1.0
SPOT_LIGHT_INTENSITY_MULT = 1.0

# Camera defaults, in millimeters
DEFAULT_HORIZONTAL_APERTURE = 36.0
DEFAULT_FOCAL_LENGTH = 50.0

# Ceiling on the ratio between the smallest and largest scattering extinction
VOLUME_SCATTER_MAX_MULTIPLIER = 1e3
