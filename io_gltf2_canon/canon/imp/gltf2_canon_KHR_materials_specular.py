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
from .gltf2_canon_material_utils import scalar_factor_and_texture, color_factor_and_texture


def specular(mh):
    ext = mh.get_ext('KHR_materials_specular')
    if ext is None:
        return

    # [Texture] => [Separate A] => [Specular Factor] =>
    scalar_factor_and_texture(
        mh, 'specular_level',
        tex_info=mh.read_texture_info(ext, 'specularTexture'),
        usage='specularLevel',
        tex_channel=Channel.A,
        factor=mh.read_float(ext, 'specularFactor', 1.0),
        default=1.0,
    )
    color_factor_and_texture(
        mh, 'specular_color',
        tex_info=mh.read_texture_info(ext, 'specularColorTexture'),
        usage='specularColor',
        factor=mh.read_floats(ext, 'specularColorFactor', [1.0, 1.0, 1.0]),
        default=1.0,
    )
