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

from ..com.gltf2_canon_model import Channel
from .gltf2_canon_material_utils import \
    scalar_factor_and_texture, color_factor_and_texture, normal_map, value1


def clearcoat(mh):
    ext = mh.get_ext('KHR_materials_clearcoat')
    if ext is None:
        return

    # [Texture] => [Separate R] => [Clearcoat Factor] =>
    scalar_factor_and_texture(
        mh, 'clearcoat',
        tex_info=mh.read_texture_info(ext, 'clearcoatTexture'),
        usage='clearcoat',
        tex_channel=Channel.R,
        factor=mh.read_float(ext, 'clearcoatFactor', 0.0),
    )
    # [Texture] => [Separate G] => [Roughness Factor] =>
    scalar_factor_and_texture(
        mh, 'clearcoat_roughness',
        tex_info=mh.read_texture_info(ext, 'clearcoatRoughnessTexture'),
        usage='clearcoatRoughness',
        tex_channel=Channel.G,
        factor=mh.read_float(ext, 'clearcoatRoughnessFactor', 0.0),
    )
    normal_map(
        mh, 'clearcoat_normal',
        tex_info=mh.read_normal_texture_info(ext, 'clearcoatNormalTexture'),
        usage='clearcoatNormal',
    )


def clearcoat_specular(mh):
    ext = mh.get_ext('ADOBE_materials_clearcoat_specular')
    if ext is None:
        return

    mh.set('clearcoat_ior', value1(mh.read_float(ext, 'clearcoatIor', 1.5)))
    # [Texture] => [Separate B] => [Clearcoat Specular Factor] =>
    scalar_factor_and_texture(
        mh, 'clearcoat_specular',
        tex_info=mh.read_texture_info(ext, 'clearcoatSpecularTexture'),
        usage='clearcoatSpecular',
        tex_channel=Channel.B,
        factor=mh.read_float(ext, 'clearcoatSpecularFactor', 1.0),
        default=1.0,
    )


def clearcoat_color(mh):
    # The multi-vendor extension wins over the older vendor one
    ext = mh.get_ext('EXT_materials_clearcoat_color')
    if ext is not None:
        factor_key, texture_key = 'clearcoatColorFactor', 'clearcoatColorTexture'
    else:
        ext = mh.get_ext('ADOBE_materials_clearcoat_tint')
        if ext is None:
            return
        factor_key, texture_key = 'clearcoatTintFactor', 'clearcoatTintTexture'

    color_factor_and_texture(
        mh, 'clearcoat_color',
        tex_info=mh.read_texture_info(ext, texture_key),
        usage='clearcoatColor',
        factor=mh.read_floats(ext, factor_key, [1.0, 1.0, 1.0]),
        default=1.0,
    )
