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

from math import pi, degrees

from ...io.com.gltf2_io_constants import \
    DEFAULT_POINT_LIGHT_RADIUS, DEFAULT_SPOT_LIGHT_RADIUS, \
    DIRECTIONAL_LIGHT_INTENSITY_MULT, POINT_LIGHT_INTENSITY_MULT, SPOT_LIGHT_INTENSITY_MULT
from ...io.com.gltf2_io_debug import WarningKind
from ..com.gltf2_canon_model import Light, LightType
from .gltf2_canon_validate import get_lights


class CanonLight():
    """KHR_lights_punctual lights.

    Canonical lights emit from their surface, so point and spot intensities
    are divided by the area of the default sphere or disk they become.
    """
    def __new__(cls, *args, **kwargs):
        raise RuntimeError("%s should not be instantiated" % cls)

    @staticmethod
    def create_all(gltf):
        for light_idx, pylight in enumerate(get_lights(gltf)):
            gltf.canon.lights.append(CanonLight.create(gltf, light_idx, pylight))

    @staticmethod
    def create(gltf, light_idx, pylight):
        light = Light()
        if not isinstance(pylight, dict):
            gltf.log.warning("Light %d is not an object" % light_idx, WarningKind.Shape)
            return light

        light_type = pylight.get('type')
        light.display_name = pylight.get('name') or {
            'directional': "Sun", 'point': "Point", 'spot': "Spot"
        }.get(light_type, "Light")

        color = pylight.get('color')
        if isinstance(color, list) and len(color) >= 3:
            light.color = tuple(float(c) for c in color[:3])

        context = "light %d" % light_idx
        intensity = read_number(gltf, pylight, "intensity", 1.0, context)

        if light_type == "directional":
            light.type = LightType.Sun
            intensity /= DIRECTIONAL_LIGHT_INTENSITY_MULT

        elif light_type == "point":
            light.type = LightType.Sphere
            light.radius = DEFAULT_POINT_LIGHT_RADIUS
            # Sphere area, 4 pi r^2
            intensity /= 4.0 * pi * DEFAULT_POINT_LIGHT_RADIUS * DEFAULT_POINT_LIGHT_RADIUS
            intensity /= POINT_LIGHT_INTENSITY_MULT

        elif light_type == "spot":
            light.type = LightType.Disk
            light.radius = DEFAULT_SPOT_LIGHT_RADIUS
            # Disk area, pi r^2
            intensity /= pi * DEFAULT_SPOT_LIGHT_RADIUS * DEFAULT_SPOT_LIGHT_RADIUS
            intensity /= SPOT_LIGHT_INTENSITY_MULT

            spot = pylight.get('spot') if isinstance(pylight.get('spot'), dict) else {}
            outer = read_number(gltf, spot, "outerConeAngle", pi / 4, context)
            inner = read_number(gltf, spot, "innerConeAngle", 0.0, context)
            # The outer cone is the canonical cone; the falloff is the
            # fraction of it between the inner and outer angles.
            light.cone_angle = degrees(outer)
            light.cone_falloff = 1.0 - inner / outer if outer > 0 else 0.0

        else:
            gltf.log.warning("Unsupported light type '%s' for light %d" % (light_type, light_idx),
                             WarningKind.Unsupported)

        light.intensity = intensity
        return light


def read_number(gltf, obj, key, default, context):
    value = obj.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        gltf.log.warning("Invalid %s %r for %s" % (key, value, context), WarningKind.Shape)
        return default
    return float(value)
