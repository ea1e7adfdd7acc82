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

from math import tan

from ...io.com.gltf2_io_constants import DEFAULT_FOCAL_LENGTH, DEFAULT_HORIZONTAL_APERTURE
from ...io.com.gltf2_io_debug import WarningKind
from ..com.gltf2_canon_model import Camera

# Orthographic apertures are expressed in tenths of a scene unit
ORTHOGRAPHIC_APERTURE_UNIT = 0.1


class CanonCamera():
    """Canonical Camera."""
    def __new__(cls, *args, **kwargs):
        raise RuntimeError("%s should not be instantiated" % cls)

    @staticmethod
    def create_all(gltf):
        for camera_idx in range(len(gltf.data.cameras or [])):
            gltf.canon.cameras.append(CanonCamera.create(gltf, camera_idx))

    @staticmethod
    def create(gltf, camera_idx):
        pycamera = gltf.data.cameras[camera_idx]

        cam = Camera()
        cam.display_name = pycamera.name or "Camera"

        if pycamera.type == "orthographic" and pycamera.orthographic is not None:
            CanonCamera.orthographic(gltf, cam, pycamera.orthographic)
        elif pycamera.type == "perspective" and pycamera.perspective is not None:
            CanonCamera.perspective(gltf, cam, pycamera.perspective)
        else:
            gltf.log.warning("Camera %d has type '%s' without matching properties" % (camera_idx, pycamera.type),
                             WarningKind.Shape)
            cam.f = DEFAULT_FOCAL_LENGTH
            cam.horizontal_aperture = DEFAULT_HORIZONTAL_APERTURE
            cam.vertical_aperture = DEFAULT_HORIZONTAL_APERTURE

        return cam

    @staticmethod
    def perspective(gltf, cam, pyperspective):
        cam.projection = Camera.Perspective
        cam.near_z = pyperspective.znear
        # None means an infinite projection
        cam.far_z = pyperspective.zfar
        cam.fov = pyperspective.yfov

        aspect_ratio = pyperspective.aspect_ratio
        if aspect_ratio is None or aspect_ratio <= 0:
            if aspect_ratio is not None:
                gltf.log.warning("Invalid camera aspect ratio %s, using 1.0" % aspect_ratio, WarningKind.Shape)
            aspect_ratio = 1.0
        cam.aspect_ratio = aspect_ratio

        # Vertical field of view, with a fixed horizontal film back
        cam.horizontal_aperture = DEFAULT_HORIZONTAL_APERTURE
        cam.vertical_aperture = DEFAULT_HORIZONTAL_APERTURE / aspect_ratio
        if pyperspective.yfov > 0:
            cam.f = cam.vertical_aperture / (2.0 * tan(pyperspective.yfov / 2.0))
        else:
            gltf.log.warning("Invalid camera yfov %s" % pyperspective.yfov, WarningKind.Shape)
            cam.f = DEFAULT_FOCAL_LENGTH

    @staticmethod
    def orthographic(gltf, cam, pyortho):
        cam.projection = Camera.Orthographic
        cam.near_z = pyortho.znear
        cam.far_z = pyortho.zfar
        cam.f = DEFAULT_FOCAL_LENGTH

        xmag = abs(pyortho.xmag)
        ymag = abs(pyortho.ymag)
        if xmag == 0 or ymag == 0:
            gltf.log.warning("Orthographic camera has zero magnification", WarningKind.Shape)
            cam.aspect_ratio = 1.0
        else:
            cam.aspect_ratio = xmag / ymag

        cam.horizontal_aperture = xmag / ORTHOGRAPHIC_APERTURE_UNIT
        cam.vertical_aperture = cam.horizontal_aperture / cam.aspect_ratio
