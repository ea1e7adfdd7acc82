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

# Matrices are 4x4 numpy arrays acting on column vectors, translation in the
# last column. Quaternions are stored x, y, z, w as in glTF.


def matrix_gltf_to_canon(m):
    """glTF matrices are authored column-major."""
    return np.array(m[:16], dtype=np.float64).reshape(4, 4).T


def quaternion_to_matrix(q):
    x, y, z, w = q
    n = x * x + y * y + z * z + w * w
    if n < 1e-12:
        return np.identity(3)
    s = 2.0 / n
    return np.array([
        [1 - s * (y * y + z * z), s * (x * y - z * w), s * (x * z + y * w)],
        [s * (x * y + z * w), 1 - s * (x * x + z * z), s * (y * z - x * w)],
        [s * (x * z - y * w), s * (y * z + x * w), 1 - s * (x * x + y * y)],
    ])


def trs_to_matrix(t, r, s):
    m = np.identity(4)
    m[:3, :3] = quaternion_to_matrix(r) * np.asarray(s, dtype=np.float64)
    m[:3, 3] = t
    return m


def invert_matrix(m):
    """Returns (inverse, ok). A singular matrix inverts to the identity."""
    try:
        return np.linalg.inv(m), True
    except np.linalg.LinAlgError:
        return np.identity(4), False


def normalize_quaternions(qs):
    norms = np.linalg.norm(qs, axis=-1, keepdims=True)
    return np.divide(qs, norms, out=np.zeros_like(qs), where=norms != 0)


def union_times(*time_arrays):
    """Ascending, duplicate-free union of any number of time arrays."""
    arrays = [np.asarray(t, dtype=np.float32).reshape(-1) for t in time_arrays if t is not None and len(t)]
    if not arrays:
        return np.empty(0, dtype=np.float32)
    return np.unique(np.concatenate(arrays))


def _bracket(times, new_times):
    """For each new time, index of the left key and the blend factor to the right one.

    Times outside the keyed range clamp to the boundary key.
    """
    idx = np.searchsorted(times, new_times, side='right') - 1
    idx = np.clip(idx, 0, len(times) - 2)
    t0 = times[idx]
    t1 = times[idx + 1]
    span = t1 - t0
    safe_span = np.where(span > 0, span, 1.0)
    f = np.where(span > 0, (new_times - t0) / safe_span, 0.0)
    return idx, np.clip(f, 0.0, 1.0)


def lerp_curve(times, values, new_times, step=False):
    times = np.asarray(times, dtype=np.float64)
    values = np.asarray(values, dtype=np.float64)
    new_times = np.asarray(new_times, dtype=np.float64)
    idx, f = _bracket(times, new_times)
    if step:
        f = np.where(f >= 1.0, 1.0, 0.0)
    f = f[:, None]
    return (1.0 - f) * values[idx] + f * values[idx + 1]


def slerp(q0, q1, f):
    """Vectorized spherical interpolation, shortest path."""
    dot = np.sum(q0 * q1, axis=1)
    q1 = np.where(dot[:, None] < 0.0, -q1, q1)
    dot = np.abs(dot)

    # Nearly parallel quaternions fall back to a normalized lerp
    close = dot > 0.9995
    theta = np.arccos(np.clip(dot, -1.0, 1.0))
    sin_theta = np.sin(theta)
    safe_sin = np.where(close, 1.0, sin_theta)
    w0 = np.where(close, 1.0 - f, np.sin((1.0 - f) * theta) / safe_sin)
    w1 = np.where(close, f, np.sin(f * theta) / safe_sin)
    return normalize_quaternions(w0[:, None] * q0 + w1[:, None] * q1)


def slerp_curve(times, quats, new_times, step=False):
    times = np.asarray(times, dtype=np.float64)
    quats = np.asarray(quats, dtype=np.float64)
    new_times = np.asarray(new_times, dtype=np.float64)
    idx, f = _bracket(times, new_times)
    if step:
        f = np.where(f >= 1.0, 1.0, 0.0)
    return slerp(quats[idx], quats[idx + 1], f)
