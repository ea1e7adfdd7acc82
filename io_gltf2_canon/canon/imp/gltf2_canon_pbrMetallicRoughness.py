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

from ...io.com.gltf2_io import MaterialPBRMetallicRoughness
from ..com.gltf2_canon_model import Channel, Colorspace
from .gltf2_canon_texture import texture
from .gltf2_canon_material_utils import \
    scale1, scale3, value1, value3, share_transform, normal_map
from .gltf2_canon_KHR_materials_ior import ior
from .gltf2_canon_KHR_materials_specular import specular
from .gltf2_canon_KHR_materials_clearcoat import clearcoat, clearcoat_specular, clearcoat_color
from .gltf2_canon_KHR_materials_sheen import sheen
from .gltf2_canon_KHR_materials_transmission import transmission, diffuse_transmission
from .gltf2_canon_KHR_materials_volume import volume, volume_scatter, subsurface


def pbr_metallic_roughness(mh):
    """Fills channels for pbrMetallicRoughness materials and their extensions."""
    pbr = mh.pymat.pbr_metallic_roughness
    if pbr is None:
        pbr = MaterialPBRMetallicRoughness.from_dict({})

    base_color(mh, pbr)
    metallic_roughness(mh, pbr)

    ior(mh)
    specular(mh)
    clearcoat(mh)
    clearcoat_specular(mh)
    clearcoat_color(mh)
    sheen(mh)

    # Transmission tinting copies the normal into the clearcoat lobe
    normal(mh)
    occlusion(mh)

    has_transmission = transmission(mh)
    diffuse_transmission(mh, has_transmission)

    volume(mh)
    if not volume_scatter(mh):
        subsurface(mh)


def needs_opacity(mh):
    return mh.pymat.alpha_mode in ['BLEND', 'MASK']


# [Texture] => [Base Color Factor] =>
#           => [Alpha] => [Alpha Factor] =>
def base_color(mh, pbr):
    factor = pbr.base_color_factor
    if factor is None or len(factor) != 4:
        if factor is not None:
            mh.warn_malformed('baseColorFactor')
        factor = [1.0, 1.0, 1.0, 1.0]

    if pbr.base_color_texture is not None:
        input = texture(mh, pbr.base_color_texture, 'diffuse', Channel.RGB, Colorspace.SRGB)
        if input is not None:
            scale3(input, factor)
            mh.set('diffuse_color', input)
            if needs_opacity(mh):
                opacity = texture(mh, pbr.base_color_texture, 'diffuse', Channel.A, Colorspace.Raw)
                scale1(opacity, factor[3])
                share_transform(opacity, input)
                mh.set('opacity', opacity)
            return

    mh.set('diffuse_color', value3(factor))
    mh.set('opacity', value1(factor[3]))


# [Texture] => [Separate G] => [Roughness Factor] =>
#           => [Separate B] => [Metallic Factor] =>
def metallic_roughness(mh, pbr):
    metal_factor = pbr.metallic_factor if pbr.metallic_factor is not None else 1.0
    rough_factor = pbr.roughness_factor if pbr.roughness_factor is not None else 1.0

    if pbr.metallic_roughness_texture is not None:
        roughness = texture(mh, pbr.metallic_roughness_texture, 'metallicRoughness', Channel.G, Colorspace.Raw)
        if roughness is not None:
            metallic = texture(mh, pbr.metallic_roughness_texture, 'metallicRoughness', Channel.B, Colorspace.Raw)
            scale1(metallic, metal_factor)
            scale1(roughness, rough_factor)
            share_transform(metallic, roughness)
            mh.set('metallic', metallic)
            mh.set('roughness', roughness)
            return

    mh.set('metallic', value1(metal_factor))
    mh.set('roughness', value1(rough_factor))


# [Texture] => [Emissive Factor] => [Emissive Strength] =>
def emission(mh):
    """Emissive channel. Returns False when nothing emissive was authored."""
    strength_ext = mh.get_ext('KHR_materials_emissive_strength', {})
    strength = mh.read_float(strength_ext, 'emissiveStrength', 1.0)

    factor = mh.pymat.emissive_factor
    if factor is not None and len(factor) != 3:
        mh.warn_malformed('emissiveFactor')
        factor = None

    if mh.pymat.emissive_texture is not None:
        input = texture(mh, mh.pymat.emissive_texture, 'emissive', Channel.RGB, Colorspace.SRGB)
        if input is not None:
            scale3(input, factor or [1.0, 1.0, 1.0], strength)
            mh.set('emissive_color', input)
            return True

    if factor is not None and any(f > 0 for f in factor):
        mh.set('emissive_color', value3(factor, strength))
        return True

    return False


def alpha_cutoff(mh):
    if mh.pymat.alpha_mode == 'MASK':
        cutoff = mh.pymat.alpha_cutoff if mh.pymat.alpha_cutoff is not None else 0.5
        mh.set('opacity_threshold', value1(cutoff))


# [Texture] => [*2 - 1] =>
def normal(mh):
    tex_info = mh.pymat.normal_texture
    input = normal_map(mh, 'normal', tex_info, 'normal')
    if input is None:
        return

    # z keeps the plain [0, 1] => [-1, 1] remapping, only x and y follow the scale
    s = tex_info.scale if tex_info.scale is not None else 1.0
    input.scale = (2 * s, 2 * s, 2.0, 1.0)
    input.bias = (-s, -s, -1.0, 0.0)
    mh.set('normal_scale', value1(s))


# [Texture] => [Separate R] => [Occlusion Strength] =>
def occlusion(mh):
    tex_info = mh.pymat.occlusion_texture
    if tex_info is None:
        return
    strength = tex_info.strength if tex_info.strength is not None else 1.0

    input = texture(mh, tex_info, 'occlusion', Channel.R, Colorspace.Raw)
    if input is not None:
        scale1(input, strength)
        mh.set('occlusion', input)
    elif strength != 1.0:
        mh.set('occlusion', value1(strength))
