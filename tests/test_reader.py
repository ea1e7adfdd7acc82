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

import json
import struct

import pytest

from io_gltf2_canon import import_gltf
from io_gltf2_canon.io.imp.gltf2_io_gltf import ImportError
from io_gltf2_canon.io.com.gltf2_io_debug import WarningKind
from gltf_builder import triangle, warnings_of


def glb(doc, bin_chunk=b''):
    json_chunk = json.dumps(doc).encode('utf-8')
    json_chunk += b' ' * (-len(json_chunk) % 4)
    content = struct.pack('<I4s', len(json_chunk), b'JSON') + json_chunk
    if bin_chunk:
        bin_chunk += b'\0' * (-len(bin_chunk) % 4)
        content += struct.pack('<I4s', len(bin_chunk), b'BIN\0') + bin_chunk
    return b'glTF' + struct.pack('<II', 2, 12 + len(content)) + content


def test_version_below_2_is_fatal(tmp_path):
    path = tmp_path / 'old.gltf'
    path.write_text(json.dumps({'asset': {'version': '1.0'}}))
    with pytest.raises(ImportError):
        import_gltf(str(path))


def test_missing_version_is_fatal(tmp_path):
    path = tmp_path / 'noversion.gltf'
    path.write_text(json.dumps({'asset': {}}))
    with pytest.raises(ImportError):
        import_gltf(str(path))


def test_json_error_is_fatal(tmp_path):
    path = tmp_path / 'broken.gltf'
    path.write_text('{"asset": ')
    with pytest.raises(ImportError):
        import_gltf(str(path))


def test_non_finite_json_constant_is_fatal(tmp_path):
    path = tmp_path / 'nan.gltf'
    path.write_text('{"asset": {"version": "2.0"}, "nodes": [{"translation": [NaN, 0, 0]}]}')
    with pytest.raises(ImportError):
        import_gltf(str(path))


def test_missing_file_is_fatal(tmp_path):
    with pytest.raises(ImportError):
        import_gltf(str(tmp_path / 'nothing.gltf'))


def test_missing_external_buffer_is_fatal(builder, load):
    builder.add_mesh(triangle())
    doc = builder.to_json()
    doc['buffers'][0]['uri'] = 'missing.bin'
    builder.to_json = lambda: doc
    with pytest.raises(ImportError):
        load(builder)


def test_glb_with_bin_chunk(tmp_path, builder):
    builder.add_scene([builder.add_node(mesh=builder.add_mesh(triangle()))])
    doc = builder.to_json()
    blob = bytes(builder.blob)
    doc['buffers'] = [{'byteLength': len(blob)}]

    path = tmp_path / 'scene.glb'
    path.write_bytes(glb(doc, blob))
    scene, _ = import_gltf(str(path))

    assert len(scene.meshes) == 1
    assert scene.meshes[0].points.shape == (3, 3)
    assert scene.metadata['filenames'] == ['scene.glb']


def test_bad_glb_header_is_fatal(tmp_path):
    path = tmp_path / 'bad.glb'
    content = glb({'asset': {'version': '2.0'}})
    path.write_bytes(content[:8] + struct.pack('<I', len(content) + 4) + content[12:])
    with pytest.raises(ImportError):
        import_gltf(str(path))


def test_unsupported_required_extension_is_a_warning(builder, load):
    builder.doc['extensionsUsed'] = ['EXT_unknown_thing', 'KHR_materials_unlit']
    builder.doc['extensionsRequired'] = ['EXT_unknown_thing']
    builder.add_scene([builder.add_node()])

    scene, messages = load(builder)

    unsupported = warnings_of(messages, WarningKind.Unsupported)
    assert len(unsupported) == 1
    assert 'EXT_unknown_thing' in unsupported[0]
    assert 'KHR_materials_unlit' not in unsupported[0]
    assert len(scene.nodes) == 1


def test_draco_is_reported(builder, load):
    builder.doc['extensionsUsed'] = ['KHR_draco_mesh_compression']
    _, messages = load(builder)
    assert any('KHR_draco_mesh_compression' in m for m in warnings_of(messages, WarningKind.Unsupported))


def test_metadata(builder, load):
    builder.doc['asset'] = {
        'version': '2.0',
        'generator': 'Khronos glTF Blender I/O',
        'copyright': '2024 someone',
        'extras': {'author': 'me', 'generator': 'ignored'},
    }
    scene, _ = load(builder, name='meta.gltf')

    assert scene.metadata['version'] == '2.0'
    assert scene.metadata['author'] == 'me'
    assert scene.metadata['copyright'] == '2024 someone'
    assert scene.metadata['generator'].startswith('io_gltf2_canon ')
    assert scene.metadata['generator'].endswith('; glTF generator: Khronos glTF Blender I/O')
    assert scene.metadata['filenames'] == ['meta.gltf']
    assert scene.up_axis == 'Y'
    assert scene.meters_per_unit == 1.0


def test_generator_from_extras(builder, load):
    builder.doc['asset'] = {'version': '2.0', 'extras': {'generator': 'tool'}}
    scene, _ = load(builder)
    assert scene.metadata['generator'].endswith('; glTF generator: tool')


def test_import_settings_skip_geometry(builder, load):
    builder.add_material(name='mat')
    builder.add_scene([builder.add_node(mesh=builder.add_mesh(triangle()))])

    scene, _ = load(builder, import_geometry=False)

    assert len(scene.materials) == 1
    assert scene.meshes == []
    assert scene.nodes == []


def test_import_settings_skip_materials(builder, load):
    mat = builder.add_material(name='mat', doubleSided=True)
    mesh = builder.add_mesh(triangle())
    builder.doc['meshes'][mesh]['primitives'][0]['material'] = mat
    builder.add_scene([builder.add_node(mesh=mesh)])

    scene, _ = load(builder, import_materials=False)

    assert scene.materials == []
    assert scene.meshes[0].material == -1
    assert scene.meshes[0].double_sided
