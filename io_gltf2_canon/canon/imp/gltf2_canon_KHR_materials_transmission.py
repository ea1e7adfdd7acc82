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

import copy

from ...io.com.gltf2_io_debug import WarningKind
from ..com.gltf2_canon_model import Channel, is_input_used
from .gltf2_canon_material_utils import scalar_factor_and_texture, color_factor_and_texture


def transmission(mh):
    """Returns True if the material has KHR_materials_transmission."""
    ext = mh.get_ext('KHR_materials_transmission')
    if ext is None:
        return False

    # [Texture] => [Separate R] => [Transmission Factor] =>
    scalar_factor_and_texture(
        mh, 'transmission',
        tex_info=mh.read_texture_info(ext, 'transmissionTexture'),
        usage='transmission',
        tex_channel=Channel.R,
        factor=mh.read_float(ext, 'transmissionFactor', 0.0),
    )
    transmission_tint(mh)
    return True


def transmission_tint(mh):
    """glTF tints transmitted light with the base color. There is no such
    channel here, so the clearcoat lobe is borrowed to carry the tint, unless
    the asset already uses it.
    """
    mat = mh.mat
    if not is_input_used(mat.diffuse_color):
        return

    if is_input_used(mat.clearcoat):
        mh.gltf.log.warning(
            "Can't use the clearcoat lobe for transmission tinting on material %s, since clearcoat is in use" % mh.name,
            WarningKind.Unsupported
        )
        return

    mat.clearcoat = copy.copy(mat.transmission)
    mat.clearcoat_roughness = copy.copy(mat.roughness)
    mat.clearcoat_normal = copy.copy(mat.normal)
    mat.clearcoat_specular = copy.copy(mat.specular_level)
    mat.clearcoat_ior = copy.copy(mat.ior)

    if not is_input_used(mat.clearcoat_color):
        mat.clearcoat_color = copy.copy(mat.diffuse_color)
        mat.clearcoat_models_transmission_tint = True
    else:
        mh.gltf.log.warning(
            "Can't map baseColor to clearcoatColor for transmission, since clearcoatColor is in use, "
            "for material %s" % mh.name,
            WarningKind.Unsupported
        )


def diffuse_transmission(mh, has_transmission):
    """Approximated with plain transmission plus absorption."""
    ext = mh.get_ext('KHR_materials_diffuse_transmission')
    if ext is None:
        return

    if has_transmission:
        mh.gltf.log.warning(
            "Material %s has both KHR_materials_transmission and KHR_materials_diffuse_transmission. "
            "Ignoring the latter." % mh.name,
            WarningKind.Unsupported
        )
        return

    # [Texture] => [Separate A] => [Diffuse Transmission Factor] =>
    scalar_factor_and_texture(
        mh, 'transmission',
        tex_info=mh.read_texture_info(ext, 'diffuseTransmissionTexture'),
        usage='transmission',
        tex_channel=Channel.A,
        factor=mh.read_float(ext, 'diffuseTransmissionFactor', 0.0),
    )
    color_factor_and_texture(
        mh, 'absorption_color',
        tex_info=mh.read_texture_info(ext, 'diffuseTransmissionColorTexture'),
        usage='absorptionColor',
        factor=mh.read_floats(ext, 'diffuseTransmissionColorFactor', [1.0, 1.0, 1.0]),
    )
