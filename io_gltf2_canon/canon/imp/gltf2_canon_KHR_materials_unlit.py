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

from .gltf2_canon_material_utils import value3


def is_unlit(mh):
    return mh.get_ext('KHR_materials_unlit') is not None


def unlit(mh):
    """There is no unlit shading mode: the base color becomes emission and
    the base color goes black.
    """
    mh.set('emissive_color', copy.copy(mh.get('diffuse_color')))
    mh.set('diffuse_color', value3([0.0, 0.0, 0.0]))
    mh.mat.is_unlit = True
