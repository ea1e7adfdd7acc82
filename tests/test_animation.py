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

import math

import numpy as np

from io_gltf2_canon.io.com.gltf2_io_debug import WarningKind
from gltf_builder import warnings_of


def add_sampler(builder, samplers, times, values, type_, interpolation=None):
    sampler = {
        'input': builder.add_accessor(np.asarray(times, dtype=np.float32), 'SCALAR'),
        'output': builder.add_accessor(np.asarray(values, dtype=np.float32), type_),
    }
    if interpolation is not None:
        sampler['interpolation'] = interpolation
    samplers.append(sampler)
    return len(samplers) - 1


def add_animation(builder, curves, name=None):
    """curves: list of (node, path, times, values[, interpolation])."""
    samplers = []
    channels = []
    for node, path, times, values, *interpolation in curves:
        type_ = {'translation': 'VEC3', 'scale': 'VEC3', 'rotation': 'VEC4', 'weights': 'SCALAR'}[path]
        sampler = add_sampler(builder, samplers, times, values, type_, *interpolation)
        channels.append({'sampler': sampler, 'target': {'node': node, 'path': path}})
    animation = {'channels': channels, 'samplers': samplers}
    if name is not None:
        animation['name'] = name
    return builder.add('animations', animation)


def rig(builder):
    # 0 hip -> 1 knee, both joints of skin 0
    builder.add_node(name='hip', children=[1], translation=[0, 1, 0])
    builder.add_node(name='knee', translation=[0, 0.5, 0], scale=[2, 2, 2])
    builder.add('skins', {'joints': [0, 1]})
    builder.add_scene([0])


def z_rotation(degrees):
    half = math.radians(degrees) / 2
    return [0, 0, math.sin(half), math.cos(half)]


def test_union_of_key_times(builder, load):
    rig(builder)
    add_animation(builder, [
        (0, 'translation', [0, 1], [[0, 0, 0], [2, 0, 0]]),
        (1, 'rotation', [0.5, 2], [z_rotation(0), z_rotation(90)]),
    ])

    scene, messages = load(builder)

    assert warnings_of(messages) == []
    skeleton = scene.skeletons[0]
    assert skeleton.animated_joints == ['n0', 'n0/n1']
    anim = skeleton.skeleton_animations[0]
    np.testing.assert_allclose(anim.times, [0, 0.5, 1, 2])
    assert anim.translations.shape == (4, 2, 3)
    assert anim.rotations.shape == (4, 2, 4)
    assert anim.scales.shape == (4, 2, 3)
    assert anim.translations.dtype == np.float32

    # Interpolated, then held after the last key
    np.testing.assert_allclose(anim.translations[:, 0, 0], [0, 1, 2, 2])
    # Held before the first key
    np.testing.assert_allclose(anim.rotations[0, 1], z_rotation(0), atol=1e-6)
    # Unanimated properties hold their rest value
    np.testing.assert_allclose(anim.translations[:, 1], np.tile([0, 0.5, 0], (4, 1)))
    np.testing.assert_allclose(anim.scales[:, 1], np.full((4, 3), 2.0))
    np.testing.assert_allclose(anim.rotations[:, 0], np.tile([0, 0, 0, 1], (4, 1)))


def test_rotations_are_slerped(builder, load):
    rig(builder)
    add_animation(builder, [
        (0, 'rotation', [0, 1], [z_rotation(0), z_rotation(90)]),
        (1, 'translation', [0, 0.5, 1], [[0, 0, 0]] * 3),
    ])

    scene, _ = load(builder)

    anim = scene.skeletons[0].skeleton_animations[0]
    np.testing.assert_allclose(anim.rotations[1, 0], z_rotation(45), atol=1e-6)


def test_single_key_curve_holds_rest_value(builder, load):
    rig(builder)
    add_animation(builder, [
        (0, 'translation', [0, 1], [[0, 0, 0], [1, 0, 0]]),
        (1, 'translation', [0.5], [[9, 9, 9]]),
    ])

    scene, _ = load(builder)

    anim = scene.skeletons[0].skeleton_animations[0]
    np.testing.assert_allclose(anim.times, [0, 0.5, 1])
    np.testing.assert_allclose(anim.translations[:, 1], np.tile([0, 0.5, 0], (3, 1)))


def test_step_interpolation(builder, load):
    rig(builder)
    add_animation(builder, [
        (0, 'translation', [0, 1], [[0, 0, 0], [10, 0, 0]], 'STEP'),
        (1, 'translation', [0, 0.5, 1], [[0, 0, 0]] * 3),
    ])

    scene, _ = load(builder)

    anim = scene.skeletons[0].skeleton_animations[0]
    np.testing.assert_allclose(anim.translations[:, 0, 0], [0, 0, 10])
    assert scene.nodes[0].animations[0].translations.interpolation == 'STEP'


def test_cubic_spline_keeps_values_only(builder, load):
    builder.add_node(name='mover')
    builder.add_scene([0])
    # in-tangent, value, out-tangent per key
    add_animation(builder, [
        (0, 'translation', [0, 1], [[-1, -1, -1], [1, 2, 3], [-1, -1, -1],
                                    [-1, -1, -1], [4, 5, 6], [-1, -1, -1]], 'CUBICSPLINE'),
    ])

    scene, messages = load(builder)

    curve = scene.nodes[0].animations[0].translations
    np.testing.assert_allclose(curve.values, [[1, 2, 3], [4, 5, 6]])
    assert curve.interpolation == 'CUBICSPLINE'
    assert warnings_of(messages) == []


def test_cubic_spline_needs_three_values_per_key(builder, load):
    builder.add_node(name='mover')
    builder.add_scene([0])
    add_animation(builder, [
        (0, 'translation', [0, 1], [[1, 2, 3], [4, 5, 6]], 'CUBICSPLINE'),
    ])

    scene, messages = load(builder)

    assert scene.nodes[0].animations == []
    assert len(warnings_of(messages, WarningKind.Shape)) == 1


def test_unknown_interpolation_is_linear(builder, load):
    builder.add_node()
    builder.add_scene([0])
    add_animation(builder, [(0, 'scale', [0, 1], [[1, 1, 1], [2, 2, 2]], 'BOUNCE')])

    scene, messages = load(builder)

    assert scene.nodes[0].animations[0].scales.interpolation == 'LINEAR'
    assert any('BOUNCE' in m for m in warnings_of(messages, WarningKind.Shape))


def test_unsorted_keys_are_sorted(builder, load):
    builder.add_node()
    builder.add_scene([0])
    add_animation(builder, [(0, 'translation', [1, 0, 2], [[1, 0, 0], [0, 0, 0], [2, 0, 0]])])

    scene, messages = load(builder)

    curve = scene.nodes[0].animations[0].translations
    np.testing.assert_allclose(curve.times, [0, 1, 2])
    np.testing.assert_allclose(curve.values[:, 0], [0, 1, 2])
    assert len(warnings_of(messages, WarningKind.Shape)) == 1


def test_duplicate_channel_keeps_last(builder, load):
    builder.add_node()
    builder.add_scene([0])
    add_animation(builder, [
        (0, 'translation', [0, 1], [[0, 0, 0], [1, 0, 0]]),
        (0, 'translation', [0, 3], [[0, 0, 0], [5, 0, 0]]),
    ])

    scene, messages = load(builder)

    np.testing.assert_allclose(scene.nodes[0].animations[0].translations.times, [0, 3])
    assert len(warnings_of(messages, WarningKind.Shape)) == 1


def test_morph_weights_are_unsupported(builder, load):
    builder.add_node()
    builder.add_scene([0])
    add_animation(builder, [(0, 'weights', [0, 1], [0, 1])])

    scene, messages = load(builder)

    assert scene.nodes[0].animations == []
    assert not scene.has_animations
    assert len(warnings_of(messages, WarningKind.Unsupported)) == 1


def test_tracks(builder, load):
    builder.add_node()
    builder.add_node()
    builder.add_scene([0, 1])
    add_animation(builder, [(0, 'translation', [0.25, 1], [[0, 0, 0], [1, 0, 0]])])
    add_animation(builder, [(1, 'scale', [2, 4], [[1, 1, 1], [2, 2, 2]])], name='grow')

    scene, _ = load(builder)

    assert [t.display_name for t in scene.animation_tracks] == ['Animation0', 'grow']
    assert scene.animation_tracks[0].min_time == 0.25
    assert scene.animation_tracks[0].max_time == 1.0
    assert scene.animation_tracks[1].min_time == 2.0
    assert scene.animation_tracks[1].max_time == 4.0
    assert all(t.has_timepoints for t in scene.animation_tracks)
    assert scene.has_animations

    # One slot per track, empty where the node isn't targeted
    assert len(scene.nodes[0].animations) == 2
    assert scene.nodes[0].animations[1] is None
    assert scene.nodes[1].animations[0] is None


def test_animated_joints_span_all_tracks(builder, load):
    rig(builder)
    add_animation(builder, [(0, 'translation', [0, 1], [[0, 0, 0], [1, 0, 0]])])
    add_animation(builder, [(1, 'translation', [0, 2], [[0, 0, 0], [0, 3, 0]])])

    scene, _ = load(builder)

    skeleton = scene.skeletons[0]
    assert skeleton.animated_joints == ['n0', 'n0/n1']
    assert len(skeleton.skeleton_animations) == 2
    first, second = skeleton.skeleton_animations
    np.testing.assert_allclose(first.times, [0, 1])
    np.testing.assert_allclose(first.translations[:, 1], np.tile([0, 0.5, 0], (2, 1)))
    np.testing.assert_allclose(second.times, [0, 2])
    np.testing.assert_allclose(second.translations[:, 0], np.tile([0, 1, 0], (2, 1)))


def test_track_without_skeleton_keys(builder, load):
    rig(builder)
    builder.add_node(name='prop')
    builder.doc['scenes'][0]['nodes'].append(2)
    add_animation(builder, [(0, 'translation', [0, 1], [[0, 0, 0], [1, 0, 0]])])
    add_animation(builder, [(2, 'translation', [0, 1], [[0, 0, 0], [1, 0, 0]])])

    scene, _ = load(builder)

    assert scene.skeletons[0].animated_joints == ['n0']
    assert scene.skeletons[0].skeleton_animations[1] is None
