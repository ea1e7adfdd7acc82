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

from ..com.gltf2_canon_model import SkeletonAnimation
from ..com.gltf2_canon_math import lerp_curve, slerp_curve, union_times


class CanonSkeletonAnimation():
    """Animation Resampler.

    For every skeleton and track, the raw curves of the animated joints are
    resampled onto one shared time axis, the ascending union of all their
    key times. Joints with fewer than two keys for a property hold their rest
    value over the whole axis.
    """
    def __new__(cls, *args, **kwargs):
        raise RuntimeError("%s should not be instantiated" % cls)

    @staticmethod
    def create_all(gltf):
        if not gltf.data.skins:
            return

        animated = animated_joint_nodes(gltf)
        if not animated:
            return

        for skin_idx, pyskin in enumerate(gltf.data.skins):
            joint_nodes = []
            for joint_idx in pyskin.joints:
                if joint_idx in animated and joint_idx not in joint_nodes:
                    joint_nodes.append(joint_idx)
            if not joint_nodes:
                continue

            skeleton = gltf.canon.skeletons[skin_idx]
            skeleton.animated_joints = [gltf.joint_paths.get(idx, "n%d" % idx) for idx in joint_nodes]
            skeleton.skeleton_animations = [
                CanonSkeletonAnimation.resample(gltf, joint_nodes, anim_idx)
                for anim_idx in range(len(gltf.canon.animation_tracks))
            ]

    @staticmethod
    def resample(gltf, joint_nodes, anim_idx):
        """SkeletonAnimation of one track, or None if the track has no keys for these joints."""
        nodes = [gltf.canon.nodes[gltf.node_map[idx]] for idx in joint_nodes]
        curves = [node_curves(node, anim_idx) for node in nodes]

        times = union_times(*[
            curve.times
            for node_anim in curves if node_anim is not None
            for curve in [node_anim.translations, node_anim.rotations, node_anim.scales]
        ])
        if len(times) == 0:
            gltf.log.debug("Animation %d has no times for this skeleton" % anim_idx)
            return None

        track = gltf.canon.animation_tracks[anim_idx]
        track.has_timepoints = True
        track.min_time = min(track.min_time, float(times[0]))
        track.max_time = max(track.max_time, float(times[-1]))
        gltf.canon.has_animations = True

        anim = SkeletonAnimation()
        anim.times = times
        anim.translations = np.empty((len(times), len(nodes), 3), dtype=np.float32)
        anim.rotations = np.empty((len(times), len(nodes), 4), dtype=np.float32)
        anim.scales = np.empty((len(times), len(nodes), 3), dtype=np.float32)

        for j, (node, node_anim) in enumerate(zip(nodes, curves)):
            if node_anim is None:
                anim.translations[:, j] = node.translation
                anim.rotations[:, j] = node.rotation
                anim.scales[:, j] = node.scale
                continue
            anim.translations[:, j] = resample_vectors(node_anim.translations, node.translation, times)
            anim.rotations[:, j] = resample_rotations(node_anim.rotations, node.rotation, times)
            anim.scales[:, j] = resample_vectors(node_anim.scales, node.scale, times)

        return anim


def animated_joint_nodes(gltf):
    """glTF indices of joint nodes targeted by a TRS channel of any track."""
    animated = set()
    for node_idx, canon_idx in gltf.node_map.items():
        node = gltf.canon.nodes[canon_idx]
        if not node.is_joint:
            continue
        if any(node_anim is not None for node_anim in node.animations):
            animated.add(node_idx)
    return animated


def node_curves(node, anim_idx):
    if anim_idx < len(node.animations):
        return node.animations[anim_idx]
    return None


def resample_vectors(curve, rest, times):
    if len(curve) < 2:
        return np.broadcast_to(rest, (len(times), len(rest)))
    return lerp_curve(curve.times, curve.values, times, step=curve.interpolation == 'STEP')


def resample_rotations(curve, rest, times):
    if len(curve) < 2:
        return np.broadcast_to(rest, (len(times), 4))
    return slerp_curve(curve.times, curve.values, times, step=curve.interpolation == 'STEP')
