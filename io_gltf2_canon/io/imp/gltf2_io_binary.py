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

from ..com.gltf2_io import Accessor
from ..com.gltf2_io_constants import ComponentType, DataType
from ..com.gltf2_io_debug import WarningKind


class BinaryData():
    """Binary reader."""
    def __new__(cls, *args, **kwargs):
        raise RuntimeError("%s should not be instantiated" % cls)

    @staticmethod
    def get_buffer_view(gltf, buffer_view_idx):
        """Get binary data for buffer view."""
        buffer_view = gltf.data.buffer_views[buffer_view_idx]

        if buffer_view.buffer not in gltf.buffers.keys():
            # load buffer
            gltf.load_buffer(buffer_view.buffer)
        buffer = gltf.buffers[buffer_view.buffer]

        byte_offset = buffer_view.byte_offset
        if byte_offset is None:
            byte_offset = 0

        return buffer[byte_offset:byte_offset + buffer_view.byte_length]

    @staticmethod
    def decode_accessor(gltf, accessor_idx, cache=False):
        """Decodes accessor to 2D numpy array (count x num_components)."""
        if accessor_idx in gltf.decode_accessor_cache:
            return gltf.decode_accessor_cache[accessor_idx]

        accessor = gltf.data.accessors[accessor_idx]
        array = BinaryData.decode_accessor_obj(gltf, accessor)

        if cache:
            gltf.decode_accessor_cache[accessor_idx] = array
            # Prevent accidentally modifying cached arrays
            array.flags.writeable = False

        return array

    @staticmethod
    def decode_accessor_obj(gltf, accessor):
        dtype = ComponentType.to_numpy_dtype(accessor.component_type)
        component_nb = DataType.num_elements(accessor.type)

        # MAT2/3 columns of 1 or 2 byte components are padded to 4 bytes.
        # Nothing reads such matrices, so they are not unpacked.
        if accessor.type in [DataType.Mat2, DataType.Mat3] and dtype(1).nbytes < 4:
            gltf.log.warning(
                "Accessor of type %s with %d-byte components is not supported" % (accessor.type, dtype(1).nbytes),
                WarningKind.Unsupported
            )
            return np.zeros((accessor.count, component_nb), dtype=dtype)

        if accessor.buffer_view is not None:
            bufferView = gltf.data.buffer_views[accessor.buffer_view]
            buffer_data = BinaryData.get_buffer_view(gltf, accessor.buffer_view)

            accessor_offset = accessor.byte_offset or 0
            buffer_data = buffer_data[accessor_offset:]

            bytes_per_elem = dtype(1).nbytes
            default_stride = bytes_per_elem * component_nb
            stride = bufferView.byte_stride or default_stride

            needed = (accessor.count - 1) * stride + default_stride if accessor.count else 0
            if stride % bytes_per_elem != 0 or stride < default_stride:
                gltf.log.warning(
                    "Buffer view %d has byteStride %d, which doesn't fit %d-byte elements" %
                    (accessor.buffer_view, stride, default_stride),
                    WarningKind.Shape
                )
                array = np.zeros((accessor.count, component_nb), dtype=dtype)

            elif len(buffer_data) < needed:
                gltf.log.warning(
                    "Accessor reads %d bytes past the end of buffer view %d" %
                    (needed - len(buffer_data), accessor.buffer_view),
                    WarningKind.Shape
                )
                array = np.zeros((accessor.count, component_nb), dtype=dtype)

            elif stride == default_stride:
                array = np.frombuffer(
                    buffer_data,
                    dtype=np.dtype(dtype).newbyteorder('<'),
                    count=accessor.count * component_nb,
                )
                array = array.reshape(accessor.count, component_nb)

            else:
                # The data looks like
                #   XXXppXXXppXXXppXXX
                # where X are the components and p are padding.
                # One XXXpp group is one stride's worth of data.
                elems_per_stride = stride // bytes_per_elem
                num_elems = (accessor.count - 1) * elems_per_stride + component_nb

                array = np.frombuffer(
                    buffer_data,
                    dtype=np.dtype(dtype).newbyteorder('<'),
                    count=num_elems,
                )
                array = np.lib.stride_tricks.as_strided(
                    array,
                    shape=(accessor.count, component_nb),
                    strides=(stride, bytes_per_elem),
                )

        else:
            # No buffer view; initialize to zeros
            array = np.zeros((accessor.count, component_nb), dtype=dtype)

        if accessor.sparse:
            sparse_indices_obj = Accessor.from_dict({
                'count': accessor.sparse.count,
                'bufferView': accessor.sparse.indices.buffer_view,
                'byteOffset': accessor.sparse.indices.byte_offset or 0,
                'componentType': accessor.sparse.indices.component_type,
                'type': 'SCALAR',
            })
            sparse_values_obj = Accessor.from_dict({
                'count': accessor.sparse.count,
                'bufferView': accessor.sparse.values.buffer_view,
                'byteOffset': accessor.sparse.values.byte_offset or 0,
                'componentType': accessor.component_type,
                'type': accessor.type,
            })
            sparse_indices = BinaryData.decode_accessor_obj(gltf, sparse_indices_obj)
            sparse_values = BinaryData.decode_accessor_obj(gltf, sparse_values_obj)

            # Apply sparse
            if not array.flags.writeable:
                array = array.copy()
            sparse_indices = sparse_indices.reshape(len(sparse_indices))
            in_range = sparse_indices < len(array)
            if not np.all(in_range):
                gltf.log.warning("Sparse accessor indices exceed accessor count", WarningKind.Reference)
            array[sparse_indices[in_range]] = sparse_values[in_range]

        # Normalization
        if accessor.normalized:
            if accessor.component_type == ComponentType.Byte:  # int8
                array = np.maximum(-1.0, array / 127.0)
            elif accessor.component_type == ComponentType.UnsignedByte:  # uint8
                array = array / 255.0
            elif accessor.component_type == ComponentType.Short:  # int16
                array = np.maximum(-1.0, array / 32767.0)
            elif accessor.component_type == ComponentType.UnsignedShort:  # uint16
                array = array / 65535.0

            array = array.astype(np.float32, copy=False)

        return array

    @staticmethod
    def decode_accessor_float(gltf, accessor_idx, cache=False):
        """Decodes accessor to a float32 array, whatever its component type."""
        array = BinaryData.decode_accessor(gltf, accessor_idx, cache=cache)
        return array.astype(np.float32, copy=False)

    @staticmethod
    def get_image_data(gltf, img_idx):
        """Get data from image."""
        pyimage = gltf.data.images[img_idx]

        if pyimage.uri is not None and pyimage.buffer_view is not None:
            gltf.log.warning("Image %d has both uri and bufferView; using uri" % img_idx, WarningKind.Shape)

        if pyimage.uri is not None:
            return gltf.load_uri(pyimage.uri)
        if pyimage.buffer_view is not None:
            if pyimage.buffer_view >= len(gltf.data.buffer_views or []):
                gltf.log.warning("Image %d references invalid bufferView %d" % (img_idx, pyimage.buffer_view))
                return None
            return BinaryData.get_buffer_view(gltf, pyimage.buffer_view)
        return None
