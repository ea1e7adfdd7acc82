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
import binascii
import zlib

import numpy as np

from ...io.com.gltf2_io_debug import WarningKind
from ..com.gltf2_canon_model import NgpData

# (payload key, NgpData attribute, rows, columns); biases have no shape
MLP_ARRAYS = [
    ('spatial_mlp_l0_weight', 'density_mlp_layer0_weight', 24, 32),
    ('spatial_mlp_l0_bias', 'density_mlp_layer0_bias', 0, 0),
    ('spatial_mlp_l1_weight', 'density_mlp_layer1_weight', 16, 24),
    ('spatial_mlp_l1_bias', 'density_mlp_layer1_bias', 0, 0),
    ('vdep_mlp_l0_weight', 'color_mlp_layer0_weight', 24, 36),
    ('vdep_mlp_l0_bias', 'color_mlp_layer0_bias', 0, 0),
    ('vdep_mlp_l1_weight', 'color_mlp_layer1_weight', 24, 24),
    ('vdep_mlp_l1_bias', 'color_mlp_layer1_bias', 0, 0),
    ('vdep_mlp_l2_weight', 'color_mlp_layer2_weight', 4, 24),
    ('vdep_mlp_l2_bias', 'color_mlp_layer2_bias', 0, 0),
]

# Payloads are authored Z-up; rotate -90 degrees about X to get Y-up.
Z_UP_TO_Y_UP = np.array([
    [1.0, 0.0, 0.0, 0.0],
    [0.0, 0.0, 1.0, 0.0],
    [0.0, -1.0, 0.0, 0.0],
    [0.0, 0.0, 0.0, 1.0],
])


class CanonNgp():
    """Neural graphics primitive payload of a node."""
    def __new__(cls, *args, **kwargs):
        raise RuntimeError("%s should not be instantiated" % cls)

    @staticmethod
    def create(gltf, ngp, context):
        """Decodes the payload into gltf.canon.ngps and returns its index."""
        data = NgpData()
        gltf.canon.ngps.append(data)
        idx = len(gltf.canon.ngps) - 1

        if not isinstance(ngp, dict):
            gltf.log.warning("Neural primitive payload of %s is not an object" % context, WarningKind.Shape)
            return idx

        for key, attr, rows, cols in MLP_ARRAYS:
            raw = decode_base64(gltf, ngp, key, context)
            if raw is None:
                continue
            values = np.frombuffer(raw, dtype='<f4', count=len(raw) // 4).astype(np.float32)
            if rows and cols:
                values = unpack_mlp_weight(gltf, values, rows, cols, key, context)
            setattr(data, attr, values)

        density = decode_base64(gltf, ngp, 'density', context, compressed=True)
        density_max = ngp.get('density_max')
        if density is not None and is_number(density_max):
            # 8-bit quantized, linear
            data.density_grid = np.frombuffer(density, dtype=np.uint8).astype(np.float32) * (density_max / 255.0)

        distance = decode_base64(gltf, ngp, 'distance_grid', context, compressed=True)
        distance_max = ngp.get('distance_max')
        if distance is not None and is_number(distance_max):
            # 8-bit quantized square root
            root = np.frombuffer(distance, dtype=np.uint8).astype(np.float32) / 255.0
            data.distance_grid = root * root * distance_max

        hash_grid = decode_base64(gltf, ngp, 'hash_grid', context, compressed=True)
        if hash_grid is not None:
            data.hash_grid = np.frombuffer(hash_grid, dtype='<f2', count=len(hash_grid) // 2).astype(np.float32)

        if is_number(ngp.get('sigma_threshold')):
            data.density_threshold = float(ngp['sigma_threshold'])

        resolution = ngp.get('hash_grid_res')
        if isinstance(resolution, list):
            if all(isinstance(r, int) and not isinstance(r, bool) for r in resolution):
                data.hash_grid_resolution = list(resolution)
            else:
                gltf.log.warning("Invalid hash_grid_res for %s" % context, WarningKind.Shape)

        data.has_transform = True
        data.transform = Z_UP_TO_Y_UP.copy()

        return idx


def is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def decode_base64(gltf, ngp, key, context, compressed=False):
    """Bytes of a base64 string field, or None if it is absent or unreadable.

    Grids may be zlib-compressed; a payload without a zlib header is taken as is.
    """
    value = ngp.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        gltf.log.warning("%s of %s is not a string" % (key, context), WarningKind.Shape)
        return None
    try:
        raw = base64.b64decode(value)
    except (binascii.Error, ValueError):
        gltf.log.warning("%s of %s is not valid base64" % (key, context), WarningKind.Shape)
        return None

    if compressed and is_zlib(raw):
        try:
            raw = zlib.decompress(raw)
        except zlib.error:
            gltf.log.warning("%s of %s could not be decompressed" % (key, context), WarningKind.Shape)
            return None
    return raw


def is_zlib(raw):
    return len(raw) >= 2 and raw[0] & 0x0f == 8 and (raw[0] * 256 + raw[1]) % 31 == 0


def unpack_mlp_weight(gltf, values, rows, cols, key, context):
    """Weights are stored column by column; returns them row by row."""
    if len(values) != rows * cols:
        gltf.log.warning(
            "%s of %s has %d values (expected %dx%d)" % (key, context, len(values), rows, cols),
            WarningKind.Shape
        )
        return values
    return np.ascontiguousarray(values.reshape(cols, rows).T).reshape(rows * cols)
