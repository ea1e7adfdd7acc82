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

from math import degrees, sqrt
import numpy as np

# Reflectance of a dielectric at normal incidence
DIELECTRIC_SPECULAR = 0.04


def texture_transform_gltf_to_canon(texture_transform):
    """
    Converts a KHR_texture_transform into the rotation (degrees), scale and
    translation carried by a TextureInput.
    """
    offset = texture_transform.get('offset', [0, 0])
    rotation = texture_transform.get('rotation', 0)
    scale = texture_transform.get('scale', [1, 1])
    return {
        'offset': (float(offset[0]), float(offset[1])),
        'rotation': degrees(rotation),
        'scale': (float(scale[0]), float(scale[1])),
    }


def perceived_brightness(color):
    r, g, b = color[:3]
    return sqrt(0.299 * r * r + 0.587 * g * g + 0.114 * b * b)


def solve_metallic(diffuse, specular, one_minus_specular_strength):
    if specular < DIELECTRIC_SPECULAR:
        return 0.0

    a = DIELECTRIC_SPECULAR
    b = diffuse * one_minus_specular_strength / (1 - a) + specular - 2 * a
    c = a - specular
    d = max(b * b - 4 * a * c, 0.0)
    return float(np.clip((-b + sqrt(d)) / (2 * a), 0.0, 1.0))


def specular_glossiness_to_metallic_roughness(diffuse, specular, glossiness):
    """Closed-form conversion of spec/gloss factors.

    Returns (base_color rgb, metallic, roughness).
    """
    diffuse = np.asarray(diffuse[:3], dtype=np.float64)
    specular = np.asarray(specular[:3], dtype=np.float64)
    one_minus_specular_strength = 1.0 - float(np.max(specular))

    metallic = solve_metallic(
        perceived_brightness(diffuse),
        perceived_brightness(specular),
        one_minus_specular_strength,
    )

    eps = 1e-6
    base_from_diffuse = diffuse * one_minus_specular_strength / (1 - DIELECTRIC_SPECULAR) / max(1 - metallic, eps)
    base_from_specular = (specular - DIELECTRIC_SPECULAR * (1 - metallic)) / max(metallic, eps)
    base_color = base_from_diffuse + (base_from_specular - base_from_diffuse) * metallic * metallic
    base_color = np.clip(base_color, 0.0, 1.0)

    return tuple(float(c) for c in base_color), metallic, 1.0 - float(glossiness)
