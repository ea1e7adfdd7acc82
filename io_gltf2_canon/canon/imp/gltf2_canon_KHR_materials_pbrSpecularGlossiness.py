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

from ..com.gltf2_canon_conversion import specular_glossiness_to_metallic_roughness
from ..com.gltf2_canon_model import Channel, Colorspace
from .gltf2_canon_texture import texture
from .gltf2_canon_material_utils import scale1, scale3, value1, value3, share_transform
from .gltf2_canon_pbrMetallicRoughness import needs_opacity, normal, occlusion


def pbr_specular_glossiness(mh):
    """Fills metallic/roughness channels from a pbrSpecularGlossiness material.

    Factors are converted in closed form. Textures are not re-baked: the
    diffuse texture becomes the base color, and the glossiness in the alpha
    of the specular-glossiness texture is turned into roughness with a
    scale/bias of (-glossiness, 1).
    """
    ext = mh.get_ext('KHR_materials_pbrSpecularGlossiness', {})
    diffuse_factor = mh.read_floats(ext, 'diffuseFactor', [1.0, 1.0, 1.0, 1.0])
    specular_factor = mh.read_floats(ext, 'specularFactor', [1.0, 1.0, 1.0])
    glossiness_factor = mh.read_float(ext, 'glossinessFactor', 1.0)

    base, metallic, roughness = specular_glossiness_to_metallic_roughness(
        diffuse_factor, specular_factor, glossiness_factor,
    )

    diffuse_texture(mh, mh.read_texture_info(ext, 'diffuseTexture'), diffuse_factor, base)

    tex_info = mh.read_texture_info(ext, 'specularGlossinessTexture')
    if tex_info is None or not specular_glossiness_texture(mh, tex_info, specular_factor, glossiness_factor):
        mh.set('metallic', value1(metallic))
        mh.set('roughness', value1(roughness))

    normal(mh)
    occlusion(mh)


# [Texture] => [Diffuse Factor] =>
#           => [Alpha] => [Alpha Factor] =>
def diffuse_texture(mh, tex_info, diffuse_factor, base):
    if tex_info is not None:
        input = texture(mh, tex_info, 'diffuse', Channel.RGB, Colorspace.SRGB)
        if input is not None:
            scale3(input, diffuse_factor)
            mh.set('diffuse_color', input)
            if needs_opacity(mh):
                opacity = texture(mh, tex_info, 'diffuse', Channel.A, Colorspace.Raw)
                scale1(opacity, diffuse_factor[3])
                share_transform(opacity, input)
                mh.set('opacity', opacity)
            return

    mh.set('diffuse_color', value3(base))
    mh.set('opacity', value1(diffuse_factor[3]))


# [Texture] => [Specular Factor] =>
#           => [Alpha] => [1 - Glossiness] =>
def specular_glossiness_texture(mh, tex_info, specular_factor, glossiness_factor):
    specular = texture(mh, tex_info, 'specGloss', Channel.RGB, Colorspace.SRGB)
    if specular is None:
        return False

    scale3(specular, specular_factor)
    mh.set('specular_color', specular)

    roughness = texture(mh, tex_info, 'specGloss', Channel.A, Colorspace.Raw)
    g = glossiness_factor
    roughness.scale = (-g, -g, -g, -g)
    roughness.bias = (1.0, 1.0, 1.0, 1.0)
    share_transform(roughness, specular)
    mh.set('roughness', roughness)

    # Reflectance comes from the specular color
    mh.set('metallic', value1(0.0))
    return True
