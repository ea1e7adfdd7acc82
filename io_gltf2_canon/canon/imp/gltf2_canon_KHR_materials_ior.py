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

from ...io.com.gltf2_io_constants import GLTF_IOR
from .gltf2_canon_material_utils import value1


def ior(mh):
    ext = mh.get_ext('KHR_materials_ior')
    if ext is None:
        return
    mh.set('ior', value1(mh.read_float(ext, 'ior', GLTF_IOR)))
