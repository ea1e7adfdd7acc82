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

from ...io.com.gltf2_io_constants import DataType
from ...io.com.gltf2_io_debug import WarningKind
from ...io.imp.gltf2_io_binary import BinaryData
from ..com.gltf2_canon_model import AnimationTrack, NodeAnimation, TimeValues
from .gltf2_canon_validate import ReferenceValidator

TRS_PATHS = {
    'translation': ('translations', DataType.Vec3),
    'rotation': ('rotations', DataType.Vec4),
    'scale': ('scales', DataType.Vec3),
}


class CanonAnimation():
    """Animation tracks and raw per-node TRS curves."""
    def __new__(cls, *args, **kwargs):
        raise RuntimeError("%s should not be instantiated" % cls)

    @staticmethod
    def create_tracks(gltf):
        for anim_idx, animation in enumerate(gltf.data.animations or []):
            gltf.canon.animation_tracks.append(AnimationTrack(animation.name or "Animation%d" % anim_idx))

    @staticmethod
    def create_all(gltf):
        for anim_idx in range(len(gltf.canon.animation_tracks)):
            CanonAnimation.anim(gltf, anim_idx)

    @staticmethod
    def anim(gltf, anim_idx):
        animation = gltf.data.animations[anim_idx]
        track = gltf.canon.animation_tracks[anim_idx]
        seen = set()

        for channel_idx, channel in enumerate(animation.channels):
            context = "channel %d of animation %d (%s)" % (channel_idx, anim_idx, track.display_name)
            path = channel.target.path

            if path == 'weights':
                gltf.log.warning("Morph weight animation is not imported (%s)" % context, WarningKind.Unsupported)
                continue
            if path not in TRS_PATHS:
                gltf.log.warning("Unsupported animation path '%s' (%s)" % (path, context), WarningKind.Unsupported)
                continue

            if not ReferenceValidator.check_index(gltf, animation.samplers, channel.sampler, 'Sampler', context):
                continue
            sampler = animation.samplers[channel.sampler]

            if channel.target.node is None:
                gltf.log.debug("Channel without target node (%s)" % context)
                continue
            if channel.target.node not in gltf.node_map:
                gltf.log.warning("Could not find canonical node for glTF node %s (%s)" % (channel.target.node, context),
                                 WarningKind.Reference)
                continue
            node = gltf.canon.nodes[gltf.node_map[channel.target.node]]

            attr, data_type = TRS_PATHS[path]
            curve = read_curve(gltf, sampler, data_type, context)
            if curve is None:
                continue

            if not node.animations:
                node.animations = [None] * len(gltf.canon.animation_tracks)
            if node.animations[anim_idx] is None:
                node.animations[anim_idx] = NodeAnimation()

            key = (channel.target.node, path)
            if key in seen:
                gltf.log.warning("Node %d has several %s channels; the last one is kept (%s)" %
                                 (channel.target.node, path, context), WarningKind.Shape)
            seen.add(key)
            setattr(node.animations[anim_idx], attr, curve)

            track.min_time = min(track.min_time, float(curve.times[0]))
            track.max_time = max(track.max_time, float(curve.times[-1]))
            track.has_timepoints = True
            gltf.canon.has_animations = True


def read_curve(gltf, sampler, data_type, context):
    """TimeValues for one sampler, or None if its accessors are unusable."""
    if not ReferenceValidator.accessor(gltf, sampler.input, 'input of %s' % context, types=[DataType.Scalar]):
        return None
    if not ReferenceValidator.accessor(gltf, sampler.output, 'output of %s' % context, types=[data_type]):
        return None

    interpolation = sampler.interpolation or 'LINEAR'
    if interpolation not in ['LINEAR', 'STEP', 'CUBICSPLINE']:
        gltf.log.warning("Unknown interpolation %s, using LINEAR (%s)" % (interpolation, context), WarningKind.Shape)
        interpolation = 'LINEAR'

    key_count = gltf.data.accessors[sampler.input].count
    if key_count <= 0:
        gltf.log.warning("Animation sampler input has no keys (%s)" % context, WarningKind.Shape)
        return None
    expected = 3 * key_count if interpolation == 'CUBICSPLINE' else key_count
    if gltf.data.accessors[sampler.output].count != expected:
        gltf.log.warning(
            "Animation sampler output has %d values for %d keys (%s)" %
            (gltf.data.accessors[sampler.output].count, key_count, context),
            WarningKind.Shape
        )
        return None

    times = BinaryData.decode_accessor_float(gltf, sampler.input).reshape(key_count)
    values = BinaryData.decode_accessor_float(gltf, sampler.output)

    if interpolation == 'CUBICSPLINE':
        # Keep the values, drop the in/out tangents
        values = values[1::3]

    times = np.array(times, dtype=np.float32)
    values = np.array(values, dtype=np.float32)
    if np.any(np.diff(times) < 0):
        gltf.log.warning("Animation keys are not in ascending order (%s)" % context, WarningKind.Shape)
        order = np.argsort(times, kind='stable')
        times = times[order]
        values = values[order]

    return TimeValues(times, values, interpolation)
