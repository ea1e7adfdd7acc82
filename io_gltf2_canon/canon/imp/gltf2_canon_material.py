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

from ..com.gltf2_canon_model import Material
from .gltf2_canon_material_utils import MaterialHelper
from .gltf2_canon_pbrMetallicRoughness import pbr_metallic_roughness, emission, alpha_cutoff
from .gltf2_canon_KHR_materials_pbrSpecularGlossiness import pbr_specular_glossiness
from .gltf2_canon_KHR_materials_unlit import is_unlit, unlit


class CanonMaterial():
    """Material Channel Mapper."""
    def __new__(cls, *args, **kwargs):
        raise RuntimeError("%s should not be instantiated" % cls)

    @staticmethod
    def create(gltf, material_idx):
        """Material creation."""
        pymaterial = gltf.data.materials[material_idx]

        name = pymaterial.name
        if not name:
            name = "Material" + str(material_idx)

        mat = Material(name)
        mh = MaterialHelper(gltf, pymaterial, mat)

        if mh.get_ext('KHR_materials_pbrSpecularGlossiness') is not None:
            pbr_specular_glossiness(mh)
        else:
            pbr_metallic_roughness(mh)

        has_emission = emission(mh)
        if not has_emission and is_unlit(mh):
            unlit(mh)

        alpha_cutoff(mh)

        return mat

    @staticmethod
    def create_all(gltf):
        for material_idx in range(len(gltf.data.materials or [])):
            gltf.canon.materials.append(CanonMaterial.create(gltf, material_idx))
        gltf.log.debug("Imported %d materials" % len(gltf.canon.materials))
