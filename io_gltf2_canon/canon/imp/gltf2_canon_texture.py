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

from ...io.com.gltf2_io import Sampler
from ...io.com.gltf2_io_constants import TextureFilter, TextureWrap
from ..com.gltf2_canon_conversion import texture_transform_gltf_to_canon
from ..com.gltf2_canon_model import TextureInput, Channel, Wrap, Filter
from .gltf2_canon_image import CanonImage
from .gltf2_canon_validate import ReferenceValidator


def texture(
    mh,
    tex_info,
    usage,  # Used to name images without a name or uri
    channel=Channel.RGB,
    colorspace=None,
):
    """Makes a TextureInput for a TextureInfo, or returns None if its image can't be used."""
    image = CanonImage.create(mh.gltf, tex_info.index, mh.name, usage)
    if image < 0:
        return None

    input = TextureInput(image)
    uv_idx = tex_info.tex_coord or 0
    transform = (tex_info.extensions or {}).get('KHR_texture_transform')
    if isinstance(transform, dict) and _is_number(transform.get('texCoord')):
        uv_idx = int(transform['texCoord'])
    input.uv_index = uv_idx

    input.channel = channel
    # The alpha channel never gets the sRGB treatment
    if channel != Channel.A:
        input.colorspace = colorspace

    pytexture = mh.gltf.data.textures[tex_info.index]
    if pytexture.sampler is not None and \
            ReferenceValidator.sampler(mh.gltf, pytexture.sampler, 'texture %d' % tex_info.index):
        pysampler = mh.gltf.data.samplers[pytexture.sampler]
    else:
        pysampler = Sampler.from_dict({})
    set_wrap_mode(input, pysampler)
    set_filtering(input, pysampler)

    set_texture_transform(input, tex_info)
    return input


def set_texture_transform(input, tex_info):
    """UV transform from KHR_texture_transform. Identity values are left unset."""
    transform = (tex_info.extensions or {}).get('KHR_texture_transform')
    if not isinstance(transform, dict):
        return

    transform = texture_transform_gltf_to_canon({
        k: v for k, v in transform.items()
        if k == 'rotation' and _is_number(v) or k in ['offset', 'scale'] and _is_pair(v)
    })
    if transform['rotation'] != 0.0:
        input.uv_rotation = transform['rotation']
    if transform['scale'] != (1.0, 1.0):
        input.uv_scale = transform['scale']
    if transform['offset'] != (0.0, 0.0):
        input.uv_translation = transform['offset']


def _is_number(x):
    return isinstance(x, (int, float)) and not isinstance(x, bool)


def _is_pair(x):
    return isinstance(x, list) and len(x) == 2 and all(_is_number(v) for v in x)


def set_filtering(input, pysampler):
    """Set the filtering from the glTF sampler. Unset filters are linear."""
    input.min_filter = _filter(pysampler.min_filter)
    input.mag_filter = _filter(pysampler.mag_filter)


def _filter(gltf_filter):
    return {
        TextureFilter.Nearest: Filter.Nearest,
        TextureFilter.Linear: Filter.Linear,
        TextureFilter.NearestMipmapNearest: Filter.NearestMipmapNearest,
        TextureFilter.LinearMipmapNearest: Filter.LinearMipmapNearest,
        TextureFilter.NearestMipmapLinear: Filter.NearestMipmapLinear,
        TextureFilter.LinearMipmapLinear: Filter.LinearMipmapLinear,
    }.get(gltf_filter, Filter.Linear)


def set_wrap_mode(input, pysampler):
    """Set the wrap mode from the glTF sampler. glTF defaults to repeat."""
    input.wrap_s = _wrap(pysampler.wrap_s)
    input.wrap_t = _wrap(pysampler.wrap_t)


def _wrap(gltf_wrap):
    return {
        TextureWrap.Repeat: Wrap.Repeat,
        TextureWrap.ClampToEdge: Wrap.Clamp,
        TextureWrap.MirroredRepeat: Wrap.Mirror,
    }.get(gltf_wrap, Wrap.Repeat)
