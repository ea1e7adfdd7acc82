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

import pytest

from io_gltf2_canon import import_gltf
from gltf_builder import GltfBuilder


@pytest.fixture
def builder():
    return GltfBuilder()


@pytest.fixture
def load(tmp_path):
    """Writes a builder's document and imports it. Returns (scene, messages)."""
    def _load(builder, name='scene.gltf', **import_settings):
        return import_gltf(builder.write(tmp_path / name), import_settings)
    return _load
