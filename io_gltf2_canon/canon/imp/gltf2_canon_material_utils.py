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

from ...io.com.gltf2_io import TextureInfo, MaterialNormalTextureInfoClass
from ...io.com.gltf2_io_debug import WarningKind
from ..com.gltf2_canon_model import ConstantInput, TextureInput, Channel, Colorspace
from .gltf2_canon_texture import texture


class MaterialHelper:
    """Helper class. Stores material stuff to be passed around everywhere."""
    def __init__(self, gltf, pymat, mat):
        self.gltf = gltf
        self.pymat = pymat
        self.mat = mat
        self.name = mat.display_name

    def get_ext(self, ext_name, default=None):
        if not self.pymat.extensions:
            return default
        ext = self.pymat.extensions.get(ext_name, default)
        if ext is not default and not isinstance(ext, dict):
            self.warn_malformed(ext_name)
            return default
        return ext

    def warn_malformed(self, what):
        self.gltf.log.warning("Material %s: ignoring malformed %s" % (self.name, what), WarningKind.Shape)

    # Extension fields are read leniently. A malformed field keeps its default.

    def read_float(self, ext, key, default):
        val = ext.get(key)
        if val is None:
            return default
        if isinstance(val, (int, float)) and not isinstance(val, bool):
            return float(val)
        self.warn_malformed(key)
        return default

    def read_floats(self, ext, key, default):
        val = ext.get(key)
        if val is None:
            return list(default)
        if isinstance(val, list) and len(val) == len(default):
            return [
                float(v) if isinstance(v, (int, float)) and not isinstance(v, bool) else d
                for v, d in zip(val, default)
            ]
        self.warn_malformed(key)
        return list(default)

    def read_texture_info(self, ext, key):
        val = ext.get(key)
        if val is None:
            return None
        if not isinstance(val, dict) or not _is_int(val.get('index')):
            self.warn_malformed(key)
            return None
        tex_coord = val.get('texCoord') if _is_int(val.get('texCoord')) else None
        extensions = val.get('extensions') if isinstance(val.get('extensions'), dict) else None
        return TextureInfo(extensions, val.get('extras'), val['index'], tex_coord)

    def read_normal_texture_info(self, ext, key):
        tex_info = self.read_texture_info(ext, key)
        if tex_info is None:
            return None
        scale = self.read_float(ext[key], 'scale', 1.0)
        return MaterialNormalTextureInfoClass(tex_info.extensions, tex_info.extras, tex_info.index,
                                              scale, tex_info.tex_coord)

    def get(self, channel):
        return getattr(self.mat, channel)

    def set(self, channel, input):
        setattr(self.mat, channel, input)


def _is_int(x):
    return isinstance(x, int) and not isinstance(x, bool)


def scale1(input, factor):
    if factor != 1:
        input.scale = (factor, factor, factor, factor)


def scale3(input, factor, mult=1.0):
    if factor[0] != 1 or factor[1] != 1 or factor[2] != 1 or mult != 1:
        input.scale = (mult * factor[0], mult * factor[1], mult * factor[2], mult)


def value1(value):
    return ConstantInput(float(value))


def value3(value, mult=1.0):
    return ConstantInput(tuple(float(mult * v) for v in value[:3]))


def share_transform(dst, src):
    """Two channels read from one texture sample it with the same UV transform."""
    dst.uv_rotation = src.uv_rotation
    dst.uv_scale = src.uv_scale
    dst.uv_translation = src.uv_translation


# [Texture] => [Channel] => [Factor] =>
def scalar_factor_and_texture(mh, channel, tex_info, usage, tex_channel, factor=None, default=0.0):
    """Single channel input. Texture reads are always raw; a factor alone is
    only kept when it differs from its default.
    """
    if tex_channel == Channel.RGB:
        raise ValueError('%s is a single channel input, got an RGB texture channel' % channel)

    if tex_info is not None:
        input = texture(mh, tex_info, usage, tex_channel, Colorspace.Raw)
        if input is not None:
            if factor is not None:
                scale1(input, factor)
            mh.set(channel, input)
            return

    if factor is not None and factor != default:
        mh.set(channel, value1(factor))


# [Texture] => [Color Factor] =>
def color_factor_and_texture(mh, channel, tex_info, usage, factor, default=0.0):
    """Color input. Texture reads are sRGB."""
    if tex_info is not None:
        input = texture(mh, tex_info, usage, Channel.RGB, Colorspace.SRGB)
        if input is not None:
            scale3(input, factor)
            mh.set(channel, input)
            return

    if any(f != default for f in factor[:3]):
        mh.set(channel, value3(factor))


# [Texture] => [*2 - 1] =>
def normal_map(mh, channel, tex_info, usage):
    """Normal map input. Normal maps are raw and always get a scale of 2 and
    a bias of -1, multiplied by the texture's scale.
    """
    if tex_info is None:
        return None
    input = texture(mh, tex_info, usage, Channel.RGB, Colorspace.Raw)
    if input is None:
        return None
    s = tex_info.scale if tex_info.scale is not None else 1.0
    input.scale = (2 * s, 2 * s, 2 * s, 1.0)
    input.bias = (-s, -s, -s, 0.0)
    mh.set(channel, input)
    return input


def apply_multiplier(input, mult):
    """Multiplies an rgb input by a constant color."""
    if isinstance(input, TextureInput) and input.image >= 0:
        input = input.copy()
        input.scale = (input.scale[0] * mult[0], input.scale[1] * mult[1], input.scale[2] * mult[2], input.scale[3])
        return input
    if isinstance(input, ConstantInput) and isinstance(input.value, tuple) and len(input.value) == 3:
        return value3([m * v for m, v in zip(mult, input.value)])
    return value3(mult)
