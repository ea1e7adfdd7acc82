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

from ..com.gltf2_io import gltf_from_dict
from ..com.gltf2_io_debug import Log, WarningKind
from ..com.gltf2_io_constants import NGP_EXTENSION_NAME
import logging
import json
import struct
import base64
import binascii
from os.path import dirname, join, isfile
from urllib.parse import unquote


# Raise this error to have the importer report an error message.
class ImportError(RuntimeError):
    pass


class glTFImporter():
    """glTF Importer class."""

    def __init__(self, filename, import_settings):
        """initialization."""
        self.filename = filename
        self.import_settings = import_settings
        self.glb_buffer = None
        self.buffers = {}
        self.accessor_cache = {}
        self.decode_accessor_cache = {}

        if 'loglevel' not in self.import_settings.keys():
            self.import_settings['loglevel'] = logging.ERROR
        if 'import_materials' not in self.import_settings.keys():
            self.import_settings['import_materials'] = True
        if 'import_geometry' not in self.import_settings.keys():
            self.import_settings['import_geometry'] = True
        if 'compute_bitangents' not in self.import_settings.keys():
            self.import_settings['compute_bitangents'] = False
        if 'flip_uvs' not in self.import_settings.keys():
            self.import_settings['flip_uvs'] = True

        self.log = Log(import_settings['loglevel'])

        self.extensions_managed = [
            # Ratified extensions
            'KHR_draco_mesh_compression',
            'KHR_lights_punctual',
            'KHR_materials_anisotropy',
            'KHR_materials_clearcoat',
            'KHR_materials_emissive_strength',
            'KHR_materials_ior',
            'KHR_materials_sheen',
            'KHR_materials_specular',
            'KHR_materials_transmission',
            'KHR_materials_unlit',
            'KHR_materials_volume',
            'KHR_texture_transform',
            'EXT_texture_webp',

            # Vendor extensions
            'ADOBE_materials_clearcoat_specular',
            'ADOBE_materials_clearcoat_tint',
            'EXT_materials_clearcoat_color',
            'EXT_materials_specular_edge_color',
            NGP_EXTENSION_NAME,

            # Archived extensions
            'KHR_materials_pbrSpecularGlossiness',

            # In-development extensions
            'KHR_materials_diffuse_transmission',
            'KHR_materials_volume_scatter',
            'KHR_materials_subsurface',
            'KHR_materials_sss',
        ]

        # Extensions that are recognized but whose payload is not decoded.
        # Assets requiring them still load, with the affected data left empty.
        self.extensions_skipped = [
            'KHR_draco_mesh_compression',
            'KHR_materials_anisotropy',
        ]

    @staticmethod
    def load_json(content):
        def bad_constant(val):
            raise ImportError('Bad glTF: json contained %s' % val)
        try:
            text = str(content, encoding='utf-8')
            return json.loads(text, parse_constant=bad_constant)
        except ValueError as e:
            raise ImportError('Bad glTF: json error: %s' % e.args[0])

    @staticmethod
    def check_version(gltf):
        """Check version. This is done *before* gltf_from_dict."""
        if not isinstance(gltf, dict) or 'asset' not in gltf:
            raise ImportError("Bad glTF: no asset in json")
        if not isinstance(gltf['asset'], dict) or 'version' not in gltf['asset']:
            raise ImportError("Bad glTF: no version")
        try:
            version = float(gltf['asset']['version'])
        except (TypeError, ValueError):
            raise ImportError("Bad glTF: invalid version %s" % gltf['asset']['version'])
        if version < 2.0:
            raise ImportError("glTF version must be at least 2.0; got %s" % gltf['asset']['version'])

    def checks(self):
        """Some checks."""
        extensions_used = self.data.extensions_used or []
        extensions_required = self.data.extensions_required or []
        for extension in extensions_required:
            if extension not in extensions_used:
                self.log.warning(
                    "Extension %s is required but not listed in extensionsUsed" % extension,
                    WarningKind.Shape
                )

        # Unsupported extensions, even required ones, only degrade the import
        unsupported = sorted(set(
            e for e in extensions_used + extensions_required if e not in self.extensions_managed
        ))
        if unsupported:
            self.log.warning(
                "Asset uses unsupported glTF extensions: %s" % ', '.join(unsupported),
                WarningKind.Unsupported
            )
        for extension in self.extensions_skipped:
            if extension in extensions_used:
                self.log.warning("Extension %s is not decoded; affected data is skipped" % extension,
                                 WarningKind.Unsupported)

    def load_glb(self, content):
        """Load binary glb."""
        magic = content[:4]
        if magic != b'glTF':
            raise ImportError("This file is not a glTF/glb file")

        version, file_size = struct.unpack_from('<II', content, offset=4)
        if version != 2:
            raise ImportError("GLB version must be 2; got %d" % version)
        if file_size != len(content):
            raise ImportError("Bad GLB: file size doesn't match")

        glb_buffer = None
        offset = 12  # header size = 12

        # JSON chunk is first
        type_, len_, json_bytes, offset = self.load_chunk(content, offset)
        if type_ != b"JSON":
            raise ImportError("Bad GLB: first chunk not JSON")
        if len_ != len(json_bytes):
            raise ImportError("Bad GLB: length of json chunk doesn't match")
        gltf = glTFImporter.load_json(json_bytes)

        # BIN chunk is second (if it exists)
        if offset < len(content):
            type_, len_, data, offset = self.load_chunk(content, offset)
            if type_ == b"BIN\0":
                if len_ != len(data):
                    raise ImportError("Bad GLB: length of BIN chunk doesn't match")
                glb_buffer = data

        return gltf, glb_buffer

    def load_chunk(self, content, offset):
        """Load chunk."""
        if offset + 8 > len(content):
            raise ImportError("Bad GLB: truncated chunk header")
        chunk_header = struct.unpack_from('<I4s', content, offset)
        data_length = chunk_header[0]
        data_type = chunk_header[1]
        data = content[offset + 8: offset + 8 + data_length]

        return data_type, data_length, data, offset + 8 + data_length

    def read(self):
        """Read file."""
        if not isfile(self.filename):
            raise ImportError("Please select a file")

        with open(self.filename, 'rb') as f:
            content = memoryview(f.read())

        if content[:4] == b'glTF':
            gltf, self.glb_buffer = self.load_glb(content)
        else:
            gltf = glTFImporter.load_json(content)
            self.glb_buffer = None

        glTFImporter.check_version(gltf)

        try:
            self.data, malformed = gltf_from_dict(gltf)
        except AssertionError:
            raise ImportError("Couldn't parse glTF. Check that the file is valid")
        for message in malformed:
            self.log.warning(message, WarningKind.Shape)

    def load_buffer(self, buffer_idx):
        """Load buffer."""
        buffer = self.data.buffers[buffer_idx]

        if buffer.uri:
            data = self.load_uri(buffer.uri)
            if data is None:
                raise ImportError("Missing resource, '" + buffer.uri + "'.")
            self.buffers[buffer_idx] = data

        else:
            # GLB-stored buffer
            if buffer_idx == 0 and self.glb_buffer is not None:
                self.buffers[buffer_idx] = self.glb_buffer
            else:
                self.log.warning("Buffer %d has no uri and no GLB payload" % buffer_idx)
                self.buffers[buffer_idx] = memoryview(b'')

    def load_uri(self, uri):
        """Loads a URI."""
        sep = ';base64,'
        if uri.startswith('data:'):
            idx = uri.find(sep)
            if idx != -1:
                data = uri[idx + len(sep):]
                try:
                    return memoryview(base64.b64decode(data))
                except binascii.Error:
                    self.log.warning("Malformed base64 data URI, using an empty buffer", WarningKind.Shape)
                    return memoryview(b'')
            return None

        path = join(dirname(self.filename), unquote(uri))
        try:
            with open(path, 'rb') as f_:
                return memoryview(f_.read())
        except OSError:
            self.log.error("Couldn't read file: " + path)
            return None
