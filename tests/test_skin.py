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

import numpy as np

from io_gltf2_canon.io.com.gltf2_io_debug import WarningKind
from gltf_builder import triangle, warnings_of


def column_major(m):
    return np.asarray(m, dtype=np.float32).T.reshape(16)


def skinned_mesh(builder):
    return builder.add_mesh(
        triangle(),
        JOINTS_0=(np.zeros((3, 4)), 'VEC4'),
        WEIGHTS_0=(np.tile([1.0, 0.0, 0.0, 0.0], (3, 1)), 'VEC4'),
    )


def test_joint_paths_and_rest_transforms(builder, load):
    # 0 armature -> 1 hip -> 2 knee ; 3 skinned mesh
    builder.add_node(name='armature', children=[1])
    builder.add_node(name='hip', translation=[0, 1, 0], children=[2])
    builder.add_node(name='knee', translation=[0, 0.5, 0])
    builder.add_node(name='body', mesh=skinned_mesh(builder), skin=0)
    builder.add('skins', {'joints': [1, 2], 'name': 'rig'})
    builder.add_scene([0, 3])

    scene, _ = load(builder)

    skeleton = scene.skeletons[0]
    assert skeleton.display_name == 'rig'
    assert skeleton.joints == ['n0/n1', 'n0/n1/n2']
    assert skeleton.joint_names == ['hip', 'knee']
    np.testing.assert_allclose(skeleton.rest_transforms[0][:3, 3], [0, 1, 0])
    np.testing.assert_allclose(skeleton.rest_transforms[1][:3, 3], [0, 0.5, 0])
    # No inverse bind matrices: identity binds
    for bind in skeleton.bind_transforms:
        np.testing.assert_allclose(bind, np.identity(4))
    assert scene.nodes[1].is_joint and scene.nodes[2].is_joint
    assert not scene.nodes[0].is_joint


def test_bind_transforms_invert_inverse_bind_matrices(builder, load):
    builder.add_node(name='joint', translation=[0, 2, 0])
    ibm = np.identity(4)
    ibm[:3, 3] = [0, -2, 0]
    builder.add('skins', {'joints': [0], 'inverseBindMatrices': builder.add_accessor([column_major(ibm)], 'MAT4')})
    builder.add_scene([0])

    scene, _ = load(builder)

    np.testing.assert_allclose(scene.skeletons[0].bind_transforms[0][:3, 3], [0, 2, 0], atol=1e-6)


def test_index_invariant_with_malformed_joints(builder, load):
    builder.add_node(name='a')
    builder.add_node(name='b')
    builder.add('skins', {'joints': [0, 42, 1, -3]})
    builder.add('skins', {'joints': []})
    builder.add_scene([0, 1])

    scene, messages = load(builder)

    skeleton = scene.skeletons[0]
    assert len(skeleton.joints) == len(skeleton.joint_names) == 4
    assert len(skeleton.rest_transforms) == len(skeleton.bind_transforms) == 4
    assert skeleton.joints[1] == 'bad_index_node_42'
    assert skeleton.joints[3] == 'bad_index_node_-3'
    np.testing.assert_allclose(skeleton.rest_transforms[1], np.identity(4))
    assert len(scene.skeletons[1].joints) == 0
    assert len(warnings_of(messages, WarningKind.Reference)) == 2


def test_inverse_bind_matrix_count_mismatch(builder, load):
    builder.add_node(translation=[1, 0, 0])
    builder.add_node()
    ibm = column_major(np.identity(4) * 2)
    builder.add('skins', {'joints': [0, 1], 'inverseBindMatrices': builder.add_accessor([ibm], 'MAT4')})
    builder.add_scene([0, 1])

    scene, messages = load(builder)

    assert len(scene.skeletons[0].bind_transforms) == 2
    for bind in scene.skeletons[0].bind_transforms:
        np.testing.assert_allclose(bind, np.identity(4))
    assert warnings_of(messages, WarningKind.Shape)


def test_inverse_bind_matrix_wrong_type(builder, load):
    builder.add_node()
    builder.add('skins', {'joints': [0], 'inverseBindMatrices': builder.add_accessor(np.zeros((1, 4)), 'VEC4')})
    builder.add_scene([0])

    scene, messages = load(builder)

    np.testing.assert_allclose(scene.skeletons[0].bind_transforms[0], np.identity(4))
    assert any('MAT4' in m for m in warnings_of(messages, WarningKind.Reference))


def test_skin_bound_to_parent_of_skinned_node(builder, load):
    # 0 group -> [1 joint, 2 body]
    builder.add_node(name='group', children=[1, 2])
    builder.add_node(name='joint')
    builder.add_node(name='body', mesh=skinned_mesh(builder), skin=0)
    builder.add('skins', {'joints': [1]})
    builder.add_scene([0])

    scene, _ = load(builder)

    assert scene.skeletons[0].parent == 0
    assert scene.skeletons[0].mesh_skinning_targets == [0]
    assert scene.nodes[0].skeletons == [0]
    # The skinned node itself carries no static geometry
    assert scene.nodes[2].static_meshes == []


def test_skin_bound_to_parent_of_skeleton_node(builder, load):
    # 0 body ; 1 rig -> 2 root joint
    builder.add_node(name='body', mesh=skinned_mesh(builder), skin=0)
    builder.add_node(name='rig', children=[2])
    builder.add_node(name='root_joint')
    builder.add('skins', {'joints': [2], 'skeleton': 2})
    builder.add_scene([0, 1])

    scene, _ = load(builder)

    rig = [n.display_name for n in scene.nodes].index('rig')
    assert scene.skeletons[0].parent == rig


def test_skin_falls_back_to_skinned_node(builder, load):
    builder.add_node(name='body', mesh=skinned_mesh(builder), skin=0)
    builder.add_node(name='joint')
    builder.add('skins', {'joints': [1]})
    builder.add_scene([0, 1])

    scene, _ = load(builder)

    assert scene.skeletons[0].parent == 0


def test_skinning_targets_are_deduplicated(builder, load):
    mesh = skinned_mesh(builder)
    builder.add_node(name='group', children=[1, 2, 3])
    builder.add_node(mesh=mesh, skin=0)
    builder.add_node(mesh=mesh, skin=0)
    builder.add_node(name='joint')
    builder.add('skins', {'joints': [3]})
    builder.add_scene([0])

    scene, _ = load(builder)

    assert scene.skeletons[0].mesh_skinning_targets == [0]
    assert scene.meshes[0].instanceable


def test_invalid_skin_keeps_static_geometry(builder, load):
    builder.add_node(mesh=skinned_mesh(builder), skin=3)
    builder.add_scene([0])

    scene, messages = load(builder)

    assert scene.nodes[0].static_meshes == [0]
    assert any('Skin' in m for m in warnings_of(messages, WarningKind.Reference))
