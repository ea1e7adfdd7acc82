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

"""Import glTF 2.0 documents into a canonical, renderer-agnostic scene."""

version = (1, 0, 0)


def get_version_string():
    return str(version[0]) + '.' + str(version[1]) + '.' + str(version[2])


def import_gltf(filename, import_settings=None):
    """Imports a .gltf or .glb file.

    Returns (scene, messages) where messages is the batch of
    (level, kind, message) tuples recorded while importing. Raises
    io.imp.gltf2_io_gltf.ImportError when the document can't be processed.
    """
    import time
    from .io.imp.gltf2_io_gltf import glTFImporter
    from .canon.imp.gltf2_canon_gltf import CanonGlTF

    gltf_importer = glTFImporter(filename, dict(import_settings or {}))
    try:
        gltf_importer.read()
        gltf_importer.checks()

        gltf_importer.log.info("Data are loaded, start creating canonical scene")

        start_time = time.time()
        scene = CanonGlTF.create(gltf_importer)
        elapsed_s = "{:.2f}s".format(time.time() - start_time)
        gltf_importer.log.info("glTF import finished in " + elapsed_s)

        return scene, list(gltf_importer.log.messages())
    finally:
        gltf_importer.log.flush()
