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

import base64
import math

import pytest

from io_gltf2_canon.canon.com.gltf2_canon_model import \
    ConstantInput, EmptyInput, TextureInput, Channel, Colorspace, Wrap, Filter
from io_gltf2_canon.io.com.gltf2_io_debug import WarningKind
from io_gltf2_canon.canon.imp.gltf2_canon_material_utils import scalar_factor_and_texture
from gltf_builder import warnings_of


def load_material(builder, load, **material):
    builder.add_node()
    builder.add_scene([0])
    builder.add_material(**material)
    scene, messages = load(builder)
    return scene.materials[-1], scene, messages


def test_defaults(builder, load):
    mat, _, messages = load_material(builder, load)

    assert mat.display_name == 'Material0'
    assert mat.diffuse_color == ConstantInput((1.0, 1.0, 1.0))
    assert mat.opacity == ConstantInput(1.0)
    assert mat.metallic == ConstantInput(1.0)
    assert mat.roughness == ConstantInput(1.0)
    assert mat.emissive_color == EmptyInput()
    assert mat.normal == EmptyInput()
    assert not mat.is_unlit
    assert warnings_of(messages) == []


def test_base_color_texture(builder, load):
    tex = builder.add_texture()
    mat, _, _ = load_material(
        builder, load, name='skin', alphaMode='BLEND',
        pbrMetallicRoughness={'baseColorTexture': {'index': tex}, 'baseColorFactor': [0.5, 1, 1, 0.25]},
    )

    diffuse = mat.diffuse_color
    assert isinstance(diffuse, TextureInput)
    assert diffuse.channel == Channel.RGB
    assert diffuse.colorspace == Colorspace.SRGB
    assert diffuse.scale == (0.5, 1, 1, 1.0)

    opacity = mat.opacity
    assert opacity.image == diffuse.image
    assert opacity.channel == Channel.A
    assert opacity.colorspace is None
    assert opacity.scale == (0.25, 0.25, 0.25, 0.25)


def test_opaque_base_color_texture_has_no_opacity(builder, load):
    tex = builder.add_texture()
    mat, _, _ = load_material(builder, load, pbrMetallicRoughness={'baseColorTexture': {'index': tex}})

    assert isinstance(mat.diffuse_color, TextureInput)
    assert mat.diffuse_color.scale == (1.0, 1.0, 1.0, 1.0)
    assert mat.opacity == EmptyInput()


def test_single_channel_reads_are_raw(builder, load):
    tex = builder.add_texture()
    mat, _, _ = load_material(
        builder, load,
        pbrMetallicRoughness={'metallicRoughnessTexture': {'index': tex}, 'metallicFactor': 0.5},
        extensions={'KHR_materials_clearcoat': {'clearcoatTexture': {'index': tex}}},
    )

    assert mat.roughness.channel == Channel.G
    assert mat.metallic.channel == Channel.B
    assert mat.clearcoat.channel == Channel.R
    for input in [mat.roughness, mat.metallic, mat.clearcoat]:
        assert input.colorspace == Colorspace.Raw
    assert mat.metallic.scale == (0.5, 0.5, 0.5, 0.5)
    assert mat.roughness.scale == (1.0, 1.0, 1.0, 1.0)


def test_normal_map(builder, load):
    tex = builder.add_texture()
    mat, _, _ = load_material(builder, load, normalTexture={'index': tex, 'scale': 0.5})

    assert mat.normal.colorspace == Colorspace.Raw
    assert mat.normal.scale == (1.0, 1.0, 2.0, 1.0)
    assert mat.normal.bias == (-0.5, -0.5, -1.0, 0.0)
    assert mat.normal_scale == ConstantInput(0.5)


def test_occlusion(builder, load):
    tex = builder.add_texture()
    mat, _, _ = load_material(builder, load, occlusionTexture={'index': tex, 'strength': 0.75})

    assert mat.occlusion.channel == Channel.R
    assert mat.occlusion.scale == (0.75, 0.75, 0.75, 0.75)


@pytest.mark.parametrize('cutoff, expected', [(None, 0.5), (0.3, 0.3)])
def test_mask_threshold(builder, load, cutoff, expected):
    material = {'alphaMode': 'MASK'}
    if cutoff is not None:
        material['alphaCutoff'] = cutoff
    mat, _, _ = load_material(builder, load, **material)

    assert mat.opacity_threshold == ConstantInput(expected)


def test_emissive_strength(builder, load):
    mat, _, _ = load_material(
        builder, load, emissiveFactor=[1, 0.5, 0],
        extensions={'KHR_materials_emissive_strength': {'emissiveStrength': 4}},
    )

    assert mat.emissive_color == ConstantInput((4.0, 2.0, 0.0))


def test_black_emission_is_unset(builder, load):
    mat, _, _ = load_material(builder, load, emissiveFactor=[0, 0, 0])

    assert mat.emissive_color == EmptyInput()


def test_unlit(builder, load):
    mat, _, _ = load_material(
        builder, load,
        pbrMetallicRoughness={'baseColorFactor': [0.25, 0.5, 0.75, 1]},
        extensions={'KHR_materials_unlit': {}},
    )

    assert mat.is_unlit
    assert mat.emissive_color == ConstantInput((0.25, 0.5, 0.75))
    assert mat.diffuse_color == ConstantInput((0.0, 0.0, 0.0))


def test_unlit_keeps_authored_emission(builder, load):
    mat, _, _ = load_material(
        builder, load, emissiveFactor=[1, 1, 1],
        pbrMetallicRoughness={'baseColorFactor': [0.25, 0.5, 0.75, 1]},
        extensions={'KHR_materials_unlit': {}},
    )

    assert not mat.is_unlit
    assert mat.diffuse_color == ConstantInput((0.25, 0.5, 0.75))


def test_specular_glossiness_factors(builder, load):
    mat, _, _ = load_material(builder, load, extensions={'KHR_materials_pbrSpecularGlossiness': {
        'diffuseFactor': [0.48, 0.48, 0.48, 1],
        'specularFactor': [0, 0, 0],
        'glossinessFactor': 0.25,
    }})

    assert mat.diffuse_color.value == pytest.approx((0.5, 0.5, 0.5))
    assert mat.metallic == ConstantInput(0.0)
    assert mat.roughness == ConstantInput(0.75)


def test_specular_glossiness_texture(builder, load):
    tex = builder.add_texture()
    mat, _, _ = load_material(builder, load, extensions={'KHR_materials_pbrSpecularGlossiness': {
        'specularGlossinessTexture': {'index': tex},
        'glossinessFactor': 0.5,
    }})

    assert mat.specular_color.colorspace == Colorspace.SRGB
    assert mat.roughness.channel == Channel.A
    assert mat.roughness.scale == (-0.5, -0.5, -0.5, -0.5)
    assert mat.roughness.bias == (1.0, 1.0, 1.0, 1.0)
    assert mat.metallic == ConstantInput(0.0)


def test_texture_transform(builder, load):
    tex = builder.add_texture()
    mat, _, _ = load_material(builder, load, pbrMetallicRoughness={'baseColorTexture': {
        'index': tex,
        'texCoord': 0,
        'extensions': {'KHR_texture_transform': {
            'rotation': math.pi / 2, 'scale': [2, 3], 'offset': [0.5, 0], 'texCoord': 1,
        }},
    }})

    input = mat.diffuse_color
    assert input.uv_rotation == pytest.approx(90.0)
    assert input.uv_scale == (2.0, 3.0)
    assert input.uv_translation == (0.5, 0.0)
    assert input.uv_index == 1


def test_sampler(builder, load):
    tex = builder.add_texture(sampler={'wrapS': 33071, 'wrapT': 33648, 'magFilter': 9728})
    mat, _, _ = load_material(builder, load, pbrMetallicRoughness={'baseColorTexture': {'index': tex}})

    input = mat.diffuse_color
    assert input.wrap_s == Wrap.Clamp
    assert input.wrap_t == Wrap.Mirror
    assert input.mag_filter == Filter.Nearest
    assert input.min_filter == Filter.Linear


def test_wrong_typed_sampler_field(builder, load):
    tex = builder.add_texture(sampler={'wrapS': 'clamp', 'wrapT': 33071, 'magFilter': 9728})
    mat, _, messages = load_material(builder, load, pbrMetallicRoughness={'baseColorTexture': {'index': tex}})

    input = mat.diffuse_color
    assert input.wrap_s == Wrap.Repeat
    assert input.wrap_t == Wrap.Clamp
    assert input.mag_filter == Filter.Nearest
    assert len(warnings_of(messages, WarningKind.Shape)) == 1


def test_images_are_deduplicated(builder, load):
    shared = builder.add_texture()
    named_a = builder.add_texture(name='wood')
    named_b = builder.add_texture(name='wood')
    builder.add_material(name='a', pbrMetallicRoughness={'baseColorTexture': {'index': shared}})
    builder.add_material(name='b', pbrMetallicRoughness={'baseColorTexture': {'index': shared}},
                         emissiveTexture={'index': named_a}, normalTexture={'index': named_b})

    scene, _ = load(builder)

    assert len(scene.images) == 3
    assert scene.materials[0].diffuse_color.image == scene.materials[1].diffuse_color.image
    assert [image.name for image in scene.images] == ['a_diffuse', 'wood', 'wood_1']
    assert scene.images[0].uri == 'a_diffuse.png'
    assert scene.images[0].data == b'\x89PNG\r\n\x1a\nfake'


def test_unreadable_image_format(builder, load):
    gif = 'data:image/gif;base64,' + base64.b64encode(b'GIF89a').decode('ascii')
    tex = builder.add_texture(uri=gif)
    mat, scene, messages = load_material(builder, load, pbrMetallicRoughness={'baseColorTexture': {'index': tex}})

    assert scene.images == []
    assert mat.diffuse_color == ConstantInput((1.0, 1.0, 1.0))
    assert len(warnings_of(messages, WarningKind.Unsupported)) == 1


def test_bad_texture_index(builder, load):
    mat, _, messages = load_material(builder, load, pbrMetallicRoughness={'baseColorTexture': {'index': 4}})

    assert mat.diffuse_color == ConstantInput((1.0, 1.0, 1.0))
    assert len(warnings_of(messages, WarningKind.Reference)) == 1


def test_specular_and_ior(builder, load):
    mat, _, _ = load_material(builder, load, extensions={
        'KHR_materials_specular': {'specularFactor': 0.5, 'specularColorFactor': [1, 0.5, 0.5]},
        'KHR_materials_ior': {'ior': 1.33},
    })

    assert mat.specular_level == ConstantInput(0.5)
    assert mat.specular_color == ConstantInput((1.0, 0.5, 0.5))
    assert mat.ior == ConstantInput(1.33)


def test_sheen(builder, load):
    tex = builder.add_texture()
    mat, _, _ = load_material(builder, load, extensions={'KHR_materials_sheen': {
        'sheenColorFactor': [1, 0, 0],
        'sheenRoughnessTexture': {'index': tex},
    }})

    assert mat.sheen_color == ConstantInput((1.0, 0.0, 0.0))
    assert mat.sheen_roughness.channel == Channel.A


def test_malformed_extension_field(builder, load):
    mat, _, messages = load_material(builder, load, extensions={
        'KHR_materials_ior': {'ior': 'glass'},
    })

    assert mat.ior == ConstantInput(1.5)
    assert len(warnings_of(messages, WarningKind.Shape)) == 1


def test_wrong_typed_core_fields(builder, load):
    mat, _, messages = load_material(
        builder, load,
        pbrMetallicRoughness={'metallicFactor': '0.5', 'roughnessFactor': 0.25},
        alphaMode=7,
    )

    assert mat.metallic == ConstantInput(1.0)
    assert mat.roughness == ConstantInput(0.25)
    assert mat.opacity == ConstantInput(1.0)
    assert len(warnings_of(messages, WarningKind.Shape)) == 2


def test_wrong_typed_texture_reference(builder, load):
    mat, _, messages = load_material(builder, load, emissiveFactor=[1, 1, 1], emissiveTexture={'index': 'first'})

    assert mat.emissive_color == ConstantInput((1.0, 1.0, 1.0))
    assert len(warnings_of(messages, WarningKind.Shape)) == 1


def test_transmission_tint(builder, load):
    mat, _, _ = load_material(
        builder, load,
        pbrMetallicRoughness={'baseColorFactor': [1, 0, 0, 1], 'roughnessFactor': 0.2},
        extensions={'KHR_materials_transmission': {'transmissionFactor': 0.8}},
    )

    assert mat.transmission == ConstantInput(0.8)
    assert mat.clearcoat == ConstantInput(0.8)
    assert mat.clearcoat_roughness == ConstantInput(0.2)
    assert mat.clearcoat_color == ConstantInput((1.0, 0.0, 0.0))
    assert mat.clearcoat_models_transmission_tint


def test_transmission_tint_leaves_used_clearcoat(builder, load):
    mat, _, messages = load_material(builder, load, extensions={
        'KHR_materials_transmission': {'transmissionFactor': 0.8},
        'KHR_materials_clearcoat': {'clearcoatFactor': 0.3},
    })

    assert mat.clearcoat == ConstantInput(0.3)
    assert not mat.clearcoat_models_transmission_tint
    assert len(warnings_of(messages, WarningKind.Unsupported)) == 1


def test_diffuse_transmission_ignored_with_transmission(builder, load):
    mat, _, messages = load_material(builder, load, extensions={
        'KHR_materials_transmission': {'transmissionFactor': 0.8},
        'KHR_materials_diffuse_transmission': {'diffuseTransmissionFactor': 0.4},
    })

    assert mat.transmission == ConstantInput(0.8)
    assert len(warnings_of(messages, WarningKind.Unsupported)) == 1


def test_volume(builder, load):
    mat, _, _ = load_material(builder, load, extensions={'KHR_materials_volume': {
        'thicknessFactor': 0.1, 'attenuationDistance': 2, 'attenuationColor': [0.5, 0.25, 1],
    }})

    assert mat.volume_thickness == ConstantInput(0.1)
    assert mat.absorption_distance == ConstantInput(2.0)
    assert mat.absorption_color == ConstantInput((0.5, 0.25, 1.0))


def test_volume_without_thickness_is_ignored(builder, load):
    mat, _, _ = load_material(builder, load, extensions={'KHR_materials_volume': {'attenuationDistance': 2}})

    assert mat.absorption_distance == EmptyInput()


def test_volume_scatter_replaces_absorption(builder, load):
    mat, _, _ = load_material(builder, load, extensions={
        'KHR_materials_volume': {'thicknessFactor': 1, 'attenuationDistance': 2, 'attenuationColor': [0.5, 0.5, 0.5]},
        'KHR_materials_volume_scatter': {'multiscatterColor': [0.5, 0.5, 0.5]},
        'KHR_materials_subsurface': {'scatterColor': [0, 1, 0]},
    })

    assert mat.absorption_color == ConstantInput((1.0, 1.0, 1.0))
    assert mat.absorption_distance == ConstantInput(0.0)
    assert mat.scattering_color == ConstantInput((0.5, 0.5, 0.5))
    assert mat.scattering_distance.value == pytest.approx(2 / math.log(2))
    assert mat.scattering_distance_scale.value == pytest.approx((1.0, 1.0, 1.0))


def test_subsurface_precedence(builder, load):
    mat, _, _ = load_material(builder, load, extensions={
        'KHR_materials_subsurface': {'scatterDistance': 0.5, 'scatterColor': [1, 0, 0]},
        'KHR_materials_sss': {'scatterDistance': 2, 'scatterColor': [0, 0, 1]},
    })

    assert mat.scattering_distance == ConstantInput(0.5)
    assert mat.scattering_color == ConstantInput((1.0, 0.0, 0.0))


def test_draft_subsurface_name(builder, load):
    mat, _, _ = load_material(builder, load, extensions={'KHR_materials_sss': {'scatterDistance': 2}})

    assert mat.scattering_distance == ConstantInput(2.0)
    assert mat.scattering_color == ConstantInput((1.0, 1.0, 1.0))


def test_clearcoat_color_extensions(builder, load):
    mat, _, _ = load_material(builder, load, extensions={
        'EXT_materials_clearcoat_color': {'clearcoatColorFactor': [0, 1, 0]},
        'ADOBE_materials_clearcoat_tint': {'clearcoatTintFactor': [1, 0, 0]},
    })

    assert mat.clearcoat_color == ConstantInput((0.0, 1.0, 0.0))


def test_single_channel_input_rejects_rgb():
    with pytest.raises(ValueError):
        scalar_factor_and_texture(None, 'metallic', None, 'metallic', Channel.RGB, factor=0.5)
