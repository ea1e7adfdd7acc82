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

import re
from os.path import basename, splitext
from urllib.parse import unquote

from ...io.imp.gltf2_io_binary import BinaryData
from ...io.com.gltf2_io_debug import WarningKind
from ..com.gltf2_canon_model import Image, ImageFormat
from .gltf2_canon_validate import ReferenceValidator

_BRACKETS = re.compile(r'[\[\]\(\)\{\}<>]')


def unique_name(name, taken):
    """Returns name, or name_1, name_2... whichever is not in taken yet. Records the result."""
    candidate = name
    suffix = 1
    while candidate in taken:
        candidate = '%s_%d' % (name, suffix)
        suffix += 1
    taken.add(candidate)
    return candidate


def _image_format(uri, mime_type):
    ext = splitext(uri or '')[1][1:].lower()
    if ext == 'png' or mime_type == 'image/png':
        return ImageFormat.Png
    if ext in ['jpg', 'jpeg'] or mime_type in ['image/jpg', 'image/jpeg']:
        return ImageFormat.Jpg
    if ext == 'webp' or mime_type == 'image/webp':
        return ImageFormat.Webp
    return None


# Note that one canonical Image is created per glTF *texture*
class CanonImage():
    """Image/texture deduplication cache."""
    def __new__(cls, *args, **kwargs):
        raise RuntimeError("%s should not be instantiated" % cls)

    @staticmethod
    def get_source(gltf, pytexture):
        if pytexture.source is not None:
            return pytexture.source
        webp = (pytexture.extensions or {}).get('EXT_texture_webp', {})
        source = webp.get('source') if isinstance(webp, dict) else None
        if isinstance(source, int) and not isinstance(source, bool):
            return source
        return None

    @staticmethod
    def create(gltf, tex_idx, material_name, usage):
        """Returns the canonical image index for a texture, or -1."""
        if not ReferenceValidator.texture(gltf, tex_idx, "material '%s'" % material_name):
            return -1

        if tex_idx in gltf.texture_image_cache:
            return gltf.texture_image_cache[tex_idx]
        # Failures are cached too
        gltf.texture_image_cache[tex_idx] = -1

        pytexture = gltf.data.textures[tex_idx]
        img_idx = CanonImage.get_source(gltf, pytexture)
        if img_idx is None:
            gltf.log.debug("For material %s: texture %d without a valid source image" % (material_name, tex_idx))
            return -1
        if not ReferenceValidator.image(gltf, img_idx, 'texture %d' % tex_idx):
            return -1

        pyimage = gltf.data.images[img_idx]
        uri = pyimage.uri or ''
        is_file = uri != '' and not uri.startswith('data:')
        if is_file:
            gltf.filenames.append(uri)

        uri_stem = splitext(basename(unquote(uri)))[0] if is_file else ''
        name = pyimage.name or uri_stem or '%s_%s' % (material_name, usage)
        name = _BRACKETS.sub('', name)

        mime_type = pyimage.mime_type
        if mime_type is None and uri.startswith('data:'):
            mime_type = uri[len('data:'):].split(';')[0]
        image_format = _image_format(uri if is_file else '', mime_type)
        if image_format is None:
            gltf.log.warning("Could not read image %d with extension %s" % (img_idx, splitext(uri)[1] or uri[:16]),
                             WarningKind.Unsupported)
            return -1

        image = Image()
        image.name = unique_name(name, gltf.image_names)
        image.uri = image.name + '.' + image_format
        image.format = image_format

        data = BinaryData.get_image_data(gltf, img_idx)
        if data is None:
            gltf.log.warning("Image %d has no readable payload" % img_idx, WarningKind.Reference)
        else:
            image.data = bytes(data)

        gltf.canon.images.append(image)
        canon_idx = len(gltf.canon.images) - 1
        gltf.texture_image_cache[tex_idx] = canon_idx
        return canon_idx
