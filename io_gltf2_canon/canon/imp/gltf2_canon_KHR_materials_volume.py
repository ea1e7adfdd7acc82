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

from ...io.com.gltf2_io_constants import VOLUME_SCATTER_MAX_MULTIPLIER
from ..com.gltf2_canon_model import Channel
from .gltf2_canon_material_utils import scalar_factor_and_texture, apply_multiplier, value1, value3


def volume(mh):
    ext = mh.get_ext('KHR_materials_volume')
    if ext is None:
        return

    thickness_factor = mh.read_float(ext, 'thicknessFactor', 0.0)
    if thickness_factor <= 0.0:
        return

    # [Texture] => [Separate G] => [Thickness Factor] =>
    scalar_factor_and_texture(
        mh, 'volume_thickness',
        tex_info=mh.read_texture_info(ext, 'thicknessTexture'),
        usage='thickness',
        tex_channel=Channel.G,
        factor=thickness_factor,
    )
    # glTF defaults the distance to infinity, 0 is used as "no absorption" here
    mh.set('absorption_distance', value1(mh.read_float(ext, 'attenuationDistance', 0.0)))
    # The attenuation color multiplies whatever absorption color is already set
    attenuation_color = mh.read_floats(ext, 'attenuationColor', [1.0, 1.0, 1.0])
    mh.set('absorption_color', apply_multiplier(mh.get('absorption_color'), attenuation_color))


def volume_scatter(mh):
    """Converts KHR_materials_volume_scatter to scattering channels.

    The attenuation of KHR_materials_volume then accounts for both absorption
    and scattering, so it is expressed with scattering channels only and the
    absorption channels are reset. Returns True if the extension is present.
    """
    ext = mh.get_ext('KHR_materials_volume_scatter')
    if ext is None:
        return False

    multiscatter_color = mh.read_floats(ext, 'multiscatterColor', [0.0, 0.0, 0.0])
    volume_ext = mh.get_ext('KHR_materials_volume', {})
    attenuation_distance = mh.read_float(volume_ext, 'attenuationDistance', 0.0)
    attenuation_color = mh.read_floats(volume_ext, 'attenuationColor', [1.0, 1.0, 1.0])

    distance, distance_scale = scattering_from_attenuation(
        multiscatter_color, attenuation_color, attenuation_distance
    )

    mh.set('scattering_color', value3(multiscatter_color))
    mh.set('scattering_distance_scale', value3(distance_scale))
    mh.set('scattering_distance', value1(distance))
    mh.set('absorption_color', value3([1.0, 1.0, 1.0]))
    mh.set('absorption_distance', value1(0.0))
    return True


def single_scattering_albedo(multiscatter_color):
    """Polynomial fit inverting the multiple-scattering albedo."""
    c = np.asarray(multiscatter_color, dtype=np.float64)
    s = 4.09712 + 4.20863 * c - np.sqrt(9.59217 + 41.6808 * c + 17.7126 * c * c)
    return 1.0 - s * s


def scattering_from_attenuation(multiscatter_color, attenuation_color, attenuation_distance):
    """Returns (scattering distance, per-axis scattering distance scale)."""
    albedo = single_scattering_albedo(multiscatter_color)

    with np.errstate(divide='ignore', invalid='ignore'):
        extinction = -np.log(np.asarray(attenuation_color, dtype=np.float64)) / attenuation_distance

    distance = max(1e-3, attenuation_distance)
    scatter_extinction = np.full(3, 1.0 / distance)
    max_albedo = float(np.max(albedo))
    if max_albedo > 0.0:
        # Largest extinction is at most VOLUME_SCATTER_MAX_MULTIPLIER times the smallest
        scatter_extinction *= max_albedo / np.maximum(albedo, max_albedo / VOLUME_SCATTER_MAX_MULTIPLIER)

    # Axes without a usable extinction keep a unit scale
    valid = np.isfinite(extinction) & (extinction > 0.0)
    scale = np.where(valid, scatter_extinction / np.where(valid, extinction, 1.0), 1.0)

    max_scale = float(np.max(scale))
    if max_scale > 1.0:
        distance *= max_scale
        scale = scale / max_scale

    return float(distance), [float(s) for s in scale]


def subsurface(mh):
    ext = mh.get_ext('KHR_materials_subsurface')
    if ext is None:
        # Name used while the extension was drafted
        ext = mh.get_ext('KHR_materials_sss')
    if ext is None:
        return

    mh.set('scattering_distance', value1(mh.read_float(ext, 'scatterDistance', float('inf'))))
    mh.set('scattering_color', value3(mh.read_floats(ext, 'scatterColor', [1.0, 1.0, 1.0])))
