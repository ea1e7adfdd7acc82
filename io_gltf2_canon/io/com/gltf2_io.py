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

# NOTE: Reduced from the quicktype classes generated from the glTF 2.0 JSON
# schema. Only the reading direction (from_dict) is kept; the document tree
# is never written back.
#
# Required fields assert on their JSON type and make the document
# unparseable. Optional fields are read leniently: a value of the wrong type
# is dropped (so the consumer's default applies) and noted in the list
# returned alongside the tree by gltf_from_dict.

import json
from contextvars import ContextVar

_malformed_fields = ContextVar('malformed_fields', default=None)


def from_int(x):
    assert isinstance(x, int) and not isinstance(x, bool)
    return x


def from_none(x):
    assert x is None
    return x


def from_union(fs, x):
    for f in fs:
        try:
            return f(x)
        except AssertionError:
            pass
    assert False


def from_dict(f, x):
    assert isinstance(x, dict)
    return {k: f(v) for (k, v) in x.items()}


def from_list(f, x):
    assert isinstance(x, list)
    return [f(y) for y in x]


def from_float(x):
    assert isinstance(x, (float, int)) and not isinstance(x, bool)
    return float(x)


def from_str(x):
    assert isinstance(x, str)
    return x


def from_bool(x):
    assert isinstance(x, bool)
    return x


def from_extensions(x):
    # Extension payloads are kept as raw JSON; their fields are read leniently
    # by whoever consumes them.
    return _lenient(lambda x: from_dict(lambda x: x, x), x, 'extensions', 'object')


def _lenient(f, x, key, expected):
    if x is None:
        return None
    try:
        return f(x)
    except AssertionError:
        issues = _malformed_fields.get()
        if issues is not None:
            issues.append("Malformed field '%s': expected %s, got %s; using the default" % (
                key, expected, json.dumps(x, default=str)[:64]))
        return None


def _opt_int(obj, key):
    return _lenient(from_int, obj.get(key), key, 'an integer')


def _opt_float(obj, key):
    return _lenient(from_float, obj.get(key), key, 'a number')


def _opt_str(obj, key):
    return _lenient(from_str, obj.get(key), key, 'a string')


def _opt_bool(obj, key):
    return _lenient(from_bool, obj.get(key), key, 'a boolean')


def _opt_floats(obj, key):
    return _lenient(lambda x: from_list(from_float, x), obj.get(key), key, 'an array of numbers')


def _opt_ints(obj, key):
    return _lenient(lambda x: from_list(from_int, x), obj.get(key), key, 'an array of integers')


def _opt_obj(obj, key, cls):
    return _lenient(cls.from_dict, obj.get(key), key, 'a valid %s object' % cls.__name__)


class AccessorSparseIndices:
    """Indices of those attributes that deviate from their initialization value."""

    def __init__(self, buffer_view, byte_offset, component_type):
        self.buffer_view = buffer_view
        self.byte_offset = byte_offset
        self.component_type = component_type

    @staticmethod
    def from_dict(obj):
        assert isinstance(obj, dict)
        buffer_view = from_int(obj.get("bufferView"))
        byte_offset = _opt_int(obj, "byteOffset")
        component_type = from_int(obj.get("componentType"))
        return AccessorSparseIndices(buffer_view, byte_offset, component_type)


class AccessorSparseValues:
    """Array of size `accessor.sparse.count` times number of components storing the displaced
    accessor attributes pointed by `accessor.sparse.indices`.
    """

    def __init__(self, buffer_view, byte_offset):
        self.buffer_view = buffer_view
        self.byte_offset = byte_offset

    @staticmethod
    def from_dict(obj):
        assert isinstance(obj, dict)
        buffer_view = from_int(obj.get("bufferView"))
        byte_offset = _opt_int(obj, "byteOffset")
        return AccessorSparseValues(buffer_view, byte_offset)


class AccessorSparse:
    """Sparse storage of attributes that deviate from their initialization value."""

    def __init__(self, count, indices, values):
        self.count = count
        self.indices = indices
        self.values = values

    @staticmethod
    def from_dict(obj):
        assert isinstance(obj, dict)
        count = from_int(obj.get("count"))
        indices = AccessorSparseIndices.from_dict(obj.get("indices"))
        values = AccessorSparseValues.from_dict(obj.get("values"))
        return AccessorSparse(count, indices, values)


class Accessor:
    """A typed view into a bufferView.  A bufferView contains raw binary data.  An accessor
    provides a typed view into a bufferView or a subset of a bufferView similar to how
    WebGL's `vertexAttribPointer()` defines an attribute in a buffer.
    """

    def __init__(self, buffer_view, byte_offset, component_type, count, extensions, extras, max, min, name,
                 normalized, sparse, type):
        self.buffer_view = buffer_view
        self.byte_offset = byte_offset
        self.component_type = component_type
        self.count = count
        self.extensions = extensions
        self.extras = extras
        self.max = max
        self.min = min
        self.name = name
        self.normalized = normalized
        self.sparse = sparse
        self.type = type

    @staticmethod
    def from_dict(obj):
        assert isinstance(obj, dict)
        buffer_view = _opt_int(obj, "bufferView")
        byte_offset = _opt_int(obj, "byteOffset")
        component_type = from_int(obj.get("componentType"))
        count = from_int(obj.get("count"))
        extensions = from_extensions(obj.get("extensions"))
        extras = obj.get("extras")
        max = _opt_floats(obj, "max")
        min = _opt_floats(obj, "min")
        name = _opt_str(obj, "name")
        normalized = _opt_bool(obj, "normalized")
        sparse = _opt_obj(obj, "sparse", AccessorSparse)
        type = from_str(obj.get("type"))
        return Accessor(buffer_view, byte_offset, component_type, count, extensions, extras, max, min, name,
                        normalized, sparse, type)


class AnimationChannelTarget:
    """The index of the node and TRS property to target."""

    def __init__(self, extensions, extras, node, path):
        self.extensions = extensions
        self.extras = extras
        self.node = node
        self.path = path

    @staticmethod
    def from_dict(obj):
        assert isinstance(obj, dict)
        extensions = from_extensions(obj.get("extensions"))
        extras = obj.get("extras")
        node = _opt_int(obj, "node")
        path = from_str(obj.get("path"))
        return AnimationChannelTarget(extensions, extras, node, path)


class AnimationChannel:
    """Targets an animation's sampler at a node's property."""

    def __init__(self, extensions, extras, sampler, target):
        self.extensions = extensions
        self.extras = extras
        self.sampler = sampler
        self.target = target

    @staticmethod
    def from_dict(obj):
        assert isinstance(obj, dict)
        extensions = from_extensions(obj.get("extensions"))
        extras = obj.get("extras")
        sampler = from_int(obj.get("sampler"))
        target = AnimationChannelTarget.from_dict(obj.get("target"))
        return AnimationChannel(extensions, extras, sampler, target)


class AnimationSampler:
    """Combines input and output accessors with an interpolation algorithm to define a keyframe
    graph (but not its target).
    """

    def __init__(self, extensions, extras, input, interpolation, output):
        self.extensions = extensions
        self.extras = extras
        self.input = input
        self.interpolation = interpolation
        self.output = output

    @staticmethod
    def from_dict(obj):
        assert isinstance(obj, dict)
        extensions = from_extensions(obj.get("extensions"))
        extras = obj.get("extras")
        input = from_int(obj.get("input"))
        interpolation = _opt_str(obj, "interpolation")
        output = from_int(obj.get("output"))
        return AnimationSampler(extensions, extras, input, interpolation, output)


class Animation:
    """A keyframe animation."""

    def __init__(self, channels, extensions, extras, name, samplers):
        self.channels = channels
        self.extensions = extensions
        self.extras = extras
        self.name = name
        self.samplers = samplers

    @staticmethod
    def from_dict(obj):
        assert isinstance(obj, dict)
        channels = from_list(AnimationChannel.from_dict, obj.get("channels", []))
        extensions = from_extensions(obj.get("extensions"))
        extras = obj.get("extras")
        name = _opt_str(obj, "name")
        samplers = from_list(AnimationSampler.from_dict, obj.get("samplers", []))
        return Animation(channels, extensions, extras, name, samplers)


class Asset:
    """Metadata about the glTF asset."""

    def __init__(self, copyright, extensions, extras, generator, min_version, version):
        self.copyright = copyright
        self.extensions = extensions
        self.extras = extras
        self.generator = generator
        self.min_version = min_version
        self.version = version

    @staticmethod
    def from_dict(obj):
        assert isinstance(obj, dict)
        copyright = _opt_str(obj, "copyright")
        extensions = from_extensions(obj.get("extensions"))
        extras = obj.get("extras")
        generator = _opt_str(obj, "generator")
        min_version = _opt_str(obj, "minVersion")
        version = from_str(obj.get("version"))
        return Asset(copyright, extensions, extras, generator, min_version, version)


class BufferView:
    """A view into a buffer generally representing a subset of the buffer."""

    def __init__(self, buffer, byte_length, byte_offset, byte_stride, extensions, extras, name, target):
        self.buffer = buffer
        self.byte_length = byte_length
        self.byte_offset = byte_offset
        self.byte_stride = byte_stride
        self.extensions = extensions
        self.extras = extras
        self.name = name
        self.target = target

    @staticmethod
    def from_dict(obj):
        assert isinstance(obj, dict)
        buffer = from_int(obj.get("buffer"))
        byte_length = from_int(obj.get("byteLength"))
        byte_offset = _opt_int(obj, "byteOffset")
        byte_stride = _opt_int(obj, "byteStride")
        extensions = from_extensions(obj.get("extensions"))
        extras = obj.get("extras")
        name = _opt_str(obj, "name")
        target = _opt_int(obj, "target")
        return BufferView(buffer, byte_length, byte_offset, byte_stride, extensions, extras, name, target)


class Buffer:
    """A buffer points to binary geometry, animation, or skins."""

    def __init__(self, byte_length, extensions, extras, name, uri):
        self.byte_length = byte_length
        self.extensions = extensions
        self.extras = extras
        self.name = name
        self.uri = uri

    @staticmethod
    def from_dict(obj):
        assert isinstance(obj, dict)
        byte_length = from_int(obj.get("byteLength"))
        extensions = from_extensions(obj.get("extensions"))
        extras = obj.get("extras")
        name = _opt_str(obj, "name")
        uri = _opt_str(obj, "uri")
        return Buffer(byte_length, extensions, extras, name, uri)


class CameraOrthographic:
    """An orthographic camera containing properties to create an orthographic projection matrix."""

    def __init__(self, xmag, ymag, zfar, znear):
        self.xmag = xmag
        self.ymag = ymag
        self.zfar = zfar
        self.znear = znear

    @staticmethod
    def from_dict(obj):
        assert isinstance(obj, dict)
        xmag = from_float(obj.get("xmag"))
        ymag = from_float(obj.get("ymag"))
        zfar = from_float(obj.get("zfar"))
        znear = from_float(obj.get("znear"))
        return CameraOrthographic(xmag, ymag, zfar, znear)


class CameraPerspective:
    """A perspective camera containing properties to create a perspective projection matrix."""

    def __init__(self, aspect_ratio, yfov, zfar, znear):
        self.aspect_ratio = aspect_ratio
        self.yfov = yfov
        self.zfar = zfar
        self.znear = znear

    @staticmethod
    def from_dict(obj):
        assert isinstance(obj, dict)
        aspect_ratio = _opt_float(obj, "aspectRatio")
        yfov = from_float(obj.get("yfov"))
        zfar = _opt_float(obj, "zfar")
        znear = from_float(obj.get("znear"))
        return CameraPerspective(aspect_ratio, yfov, zfar, znear)


class Camera:
    """A camera's projection.  A node can reference a camera to apply a transform to place the
    camera in the scene.
    """

    def __init__(self, extensions, extras, name, orthographic, perspective, type):
        self.extensions = extensions
        self.extras = extras
        self.name = name
        self.orthographic = orthographic
        self.perspective = perspective
        self.type = type

    @staticmethod
    def from_dict(obj):
        assert isinstance(obj, dict)
        extensions = from_extensions(obj.get("extensions"))
        extras = obj.get("extras")
        name = _opt_str(obj, "name")
        orthographic = _opt_obj(obj, "orthographic", CameraOrthographic)
        perspective = _opt_obj(obj, "perspective", CameraPerspective)
        type = from_str(obj.get("type"))
        return Camera(extensions, extras, name, orthographic, perspective, type)


class Image:
    """Image data used to create a texture. Image can be referenced by URI or `bufferView`
    index. `mimeType` is required in the latter case.
    """

    def __init__(self, buffer_view, extensions, extras, mime_type, name, uri):
        self.buffer_view = buffer_view
        self.extensions = extensions
        self.extras = extras
        self.mime_type = mime_type
        self.name = name
        self.uri = uri

    @staticmethod
    def from_dict(obj):
        assert isinstance(obj, dict)
        buffer_view = _opt_int(obj, "bufferView")
        extensions = from_extensions(obj.get("extensions"))
        extras = obj.get("extras")
        mime_type = _opt_str(obj, "mimeType")
        name = _opt_str(obj, "name")
        uri = _opt_str(obj, "uri")
        return Image(buffer_view, extensions, extras, mime_type, name, uri)


class TextureInfo:
    """Reference to a texture."""

    def __init__(self, extensions, extras, index, tex_coord):
        self.extensions = extensions
        self.extras = extras
        self.index = index
        self.tex_coord = tex_coord

    @staticmethod
    def from_dict(obj):
        assert isinstance(obj, dict)
        extensions = from_extensions(obj.get("extensions"))
        extras = obj.get("extras")
        index = from_int(obj.get("index"))
        tex_coord = _opt_int(obj, "texCoord")
        return TextureInfo(extensions, extras, index, tex_coord)


class MaterialNormalTextureInfoClass:
    """The normal map texture."""

    def __init__(self, extensions, extras, index, scale, tex_coord):
        self.extensions = extensions
        self.extras = extras
        self.index = index
        self.scale = scale
        self.tex_coord = tex_coord

    @staticmethod
    def from_dict(obj):
        assert isinstance(obj, dict)
        extensions = from_extensions(obj.get("extensions"))
        extras = obj.get("extras")
        index = from_int(obj.get("index"))
        scale = _opt_float(obj, "scale")
        tex_coord = _opt_int(obj, "texCoord")
        return MaterialNormalTextureInfoClass(extensions, extras, index, scale, tex_coord)


class MaterialOcclusionTextureInfoClass:
    """The occlusion map texture."""

    def __init__(self, extensions, extras, index, strength, tex_coord):
        self.extensions = extensions
        self.extras = extras
        self.index = index
        self.strength = strength
        self.tex_coord = tex_coord

    @staticmethod
    def from_dict(obj):
        assert isinstance(obj, dict)
        extensions = from_extensions(obj.get("extensions"))
        extras = obj.get("extras")
        index = from_int(obj.get("index"))
        strength = _opt_float(obj, "strength")
        tex_coord = _opt_int(obj, "texCoord")
        return MaterialOcclusionTextureInfoClass(extensions, extras, index, strength, tex_coord)


class MaterialPBRMetallicRoughness:
    """A set of parameter values that are used to define the metallic-roughness material model
    from Physically-Based Rendering (PBR) methodology.
    """

    def __init__(self, base_color_factor, base_color_texture, extensions, extras, metallic_factor,
                 metallic_roughness_texture, roughness_factor):
        self.base_color_factor = base_color_factor
        self.base_color_texture = base_color_texture
        self.extensions = extensions
        self.extras = extras
        self.metallic_factor = metallic_factor
        self.metallic_roughness_texture = metallic_roughness_texture
        self.roughness_factor = roughness_factor

    @staticmethod
    def from_dict(obj):
        assert isinstance(obj, dict)
        base_color_factor = _opt_floats(obj, "baseColorFactor")
        base_color_texture = _opt_obj(obj, "baseColorTexture", TextureInfo)
        extensions = from_extensions(obj.get("extensions"))
        extras = obj.get("extras")
        metallic_factor = _opt_float(obj, "metallicFactor")
        metallic_roughness_texture = _opt_obj(obj, "metallicRoughnessTexture", TextureInfo)
        roughness_factor = _opt_float(obj, "roughnessFactor")
        return MaterialPBRMetallicRoughness(base_color_factor, base_color_texture, extensions, extras,
                                            metallic_factor, metallic_roughness_texture, roughness_factor)


class Material:
    """The material appearance of a primitive."""

    def __init__(self, alpha_cutoff, alpha_mode, double_sided, emissive_factor, emissive_texture, extensions,
                 extras, name, normal_texture, occlusion_texture, pbr_metallic_roughness):
        self.alpha_cutoff = alpha_cutoff
        self.alpha_mode = alpha_mode
        self.double_sided = double_sided
        self.emissive_factor = emissive_factor
        self.emissive_texture = emissive_texture
        self.extensions = extensions
        self.extras = extras
        self.name = name
        self.normal_texture = normal_texture
        self.occlusion_texture = occlusion_texture
        self.pbr_metallic_roughness = pbr_metallic_roughness

    @staticmethod
    def from_dict(obj):
        assert isinstance(obj, dict)
        alpha_cutoff = _opt_float(obj, "alphaCutoff")
        alpha_mode = _opt_str(obj, "alphaMode")
        double_sided = _opt_bool(obj, "doubleSided")
        emissive_factor = _opt_floats(obj, "emissiveFactor")
        emissive_texture = _opt_obj(obj, "emissiveTexture", TextureInfo)
        extensions = from_extensions(obj.get("extensions"))
        extras = obj.get("extras")
        name = _opt_str(obj, "name")
        normal_texture = _opt_obj(obj, "normalTexture", MaterialNormalTextureInfoClass)
        occlusion_texture = _opt_obj(obj, "occlusionTexture", MaterialOcclusionTextureInfoClass)
        pbr_metallic_roughness = _opt_obj(obj, "pbrMetallicRoughness", MaterialPBRMetallicRoughness)
        return Material(alpha_cutoff, alpha_mode, double_sided, emissive_factor, emissive_texture, extensions,
                        extras, name, normal_texture, occlusion_texture, pbr_metallic_roughness)


class MeshPrimitive:
    """Geometry to be rendered with the given material."""

    def __init__(self, attributes, extensions, extras, indices, material, mode, targets):
        self.attributes = attributes
        self.extensions = extensions
        self.extras = extras
        self.indices = indices
        self.material = material
        self.mode = mode
        self.targets = targets

    @staticmethod
    def from_dict(obj):
        assert isinstance(obj, dict)
        attributes = from_dict(from_int, obj.get("attributes"))
        extensions = from_extensions(obj.get("extensions"))
        extras = obj.get("extras")
        indices = _opt_int(obj, "indices")
        material = _opt_int(obj, "material")
        mode = _opt_int(obj, "mode")
        targets = from_union([lambda x: from_list(lambda x: from_dict(from_int, x), x), from_none],
                             obj.get("targets"))
        return MeshPrimitive(attributes, extensions, extras, indices, material, mode, targets)


class Mesh:
    """A set of primitives to be rendered.  A node can contain one mesh.  A node's transform
    places the mesh in the scene.
    """

    def __init__(self, extensions, extras, name, primitives, weights):
        self.extensions = extensions
        self.extras = extras
        self.name = name
        self.primitives = primitives
        self.weights = weights

    @staticmethod
    def from_dict(obj):
        assert isinstance(obj, dict)
        extensions = from_extensions(obj.get("extensions"))
        extras = obj.get("extras")
        name = _opt_str(obj, "name")
        primitives = from_list(MeshPrimitive.from_dict, obj.get("primitives", []))
        weights = _opt_floats(obj, "weights")
        return Mesh(extensions, extras, name, primitives, weights)


class Node:
    """A node in the node hierarchy.  When the node contains `skin`, all `mesh.primitives` must
    contain `JOINTS_0` and `WEIGHTS_0` attributes.  A node can have either a `matrix` or any
    combination of `translation`/`rotation`/`scale` (TRS) properties. TRS properties are
    converted to matrices and postmultiplied in the `T * R * S` order to compose the
    transformation matrix; first the scale is applied to the vertices, then the rotation, and
    then the translation. If none are provided, the transform is the identity.
    """

    def __init__(self, camera, children, extensions, extras, matrix, mesh, name, rotation, scale, skin, translation,
                 weights):
        self.camera = camera
        self.children = children
        self.extensions = extensions
        self.extras = extras
        self.matrix = matrix
        self.mesh = mesh
        self.name = name
        self.rotation = rotation
        self.scale = scale
        self.skin = skin
        self.translation = translation
        self.weights = weights

    @staticmethod
    def from_dict(obj):
        assert isinstance(obj, dict)
        camera = _opt_int(obj, "camera")
        children = _opt_ints(obj, "children")
        extensions = from_extensions(obj.get("extensions"))
        extras = obj.get("extras")
        matrix = _opt_floats(obj, "matrix")
        mesh = _opt_int(obj, "mesh")
        name = _opt_str(obj, "name")
        rotation = _opt_floats(obj, "rotation")
        scale = _opt_floats(obj, "scale")
        skin = _opt_int(obj, "skin")
        translation = _opt_floats(obj, "translation")
        weights = _opt_floats(obj, "weights")
        return Node(camera, children, extensions, extras, matrix, mesh, name, rotation, scale, skin, translation,
                    weights)


class Sampler:
    """Texture sampler properties for filtering and wrapping modes."""

    def __init__(self, extensions, extras, mag_filter, min_filter, name, wrap_s, wrap_t):
        self.extensions = extensions
        self.extras = extras
        self.mag_filter = mag_filter
        self.min_filter = min_filter
        self.name = name
        self.wrap_s = wrap_s
        self.wrap_t = wrap_t

    @staticmethod
    def from_dict(obj):
        assert isinstance(obj, dict)
        extensions = from_extensions(obj.get("extensions"))
        extras = obj.get("extras")
        mag_filter = _opt_int(obj, "magFilter")
        min_filter = _opt_int(obj, "minFilter")
        name = _opt_str(obj, "name")
        wrap_s = _opt_int(obj, "wrapS")
        wrap_t = _opt_int(obj, "wrapT")
        return Sampler(extensions, extras, mag_filter, min_filter, name, wrap_s, wrap_t)


class Scene:
    """The root nodes of a scene."""

    def __init__(self, extensions, extras, name, nodes):
        self.extensions = extensions
        self.extras = extras
        self.name = name
        self.nodes = nodes

    @staticmethod
    def from_dict(obj):
        assert isinstance(obj, dict)
        extensions = from_extensions(obj.get("extensions"))
        extras = obj.get("extras")
        name = _opt_str(obj, "name")
        nodes = from_list(from_int, obj.get("nodes", []))
        return Scene(extensions, extras, name, nodes)


class Skin:
    """Joints and matrices defining a skin."""

    def __init__(self, extensions, extras, inverse_bind_matrices, joints, name, skeleton):
        self.extensions = extensions
        self.extras = extras
        self.inverse_bind_matrices = inverse_bind_matrices
        self.joints = joints
        self.name = name
        self.skeleton = skeleton

    @staticmethod
    def from_dict(obj):
        assert isinstance(obj, dict)
        extensions = from_extensions(obj.get("extensions"))
        extras = obj.get("extras")
        inverse_bind_matrices = _opt_int(obj, "inverseBindMatrices")
        joints = from_list(from_int, obj.get("joints", []))
        name = _opt_str(obj, "name")
        skeleton = _opt_int(obj, "skeleton")
        return Skin(extensions, extras, inverse_bind_matrices, joints, name, skeleton)


class Texture:
    """A texture and its sampler."""

    def __init__(self, extensions, extras, name, sampler, source):
        self.extensions = extensions
        self.extras = extras
        self.name = name
        self.sampler = sampler
        self.source = source

    @staticmethod
    def from_dict(obj):
        assert isinstance(obj, dict)
        extensions = from_extensions(obj.get("extensions"))
        extras = obj.get("extras")
        name = _opt_str(obj, "name")
        sampler = _opt_int(obj, "sampler")
        source = _opt_int(obj, "source")
        return Texture(extensions, extras, name, sampler, source)


class Gltf:
    """The root object for a glTF asset."""

    def __init__(self, accessors, animations, asset, buffers, buffer_views, cameras, extensions, extensions_required,
                 extensions_used, extras, images, materials, meshes, nodes, samplers, scene, scenes, skins,
                 textures):
        self.accessors = accessors
        self.animations = animations
        self.asset = asset
        self.buffers = buffers
        self.buffer_views = buffer_views
        self.cameras = cameras
        self.extensions = extensions
        self.extensions_required = extensions_required
        self.extensions_used = extensions_used
        self.extras = extras
        self.images = images
        self.materials = materials
        self.meshes = meshes
        self.nodes = nodes
        self.samplers = samplers
        self.scene = scene
        self.scenes = scenes
        self.skins = skins
        self.textures = textures

    @staticmethod
    def from_dict(obj):
        assert isinstance(obj, dict)
        accessors = from_union([lambda x: from_list(Accessor.from_dict, x), from_none], obj.get("accessors"))
        animations = from_union([lambda x: from_list(Animation.from_dict, x), from_none], obj.get("animations"))
        asset = Asset.from_dict(obj.get("asset"))
        buffers = from_union([lambda x: from_list(Buffer.from_dict, x), from_none], obj.get("buffers"))
        buffer_views = from_union([lambda x: from_list(BufferView.from_dict, x), from_none], obj.get("bufferViews"))
        cameras = from_union([lambda x: from_list(Camera.from_dict, x), from_none], obj.get("cameras"))
        extensions = from_extensions(obj.get("extensions"))
        extensions_required = from_union([lambda x: from_list(from_str, x), from_none],
                                         obj.get("extensionsRequired"))
        extensions_used = from_union([lambda x: from_list(from_str, x), from_none], obj.get("extensionsUsed"))
        extras = obj.get("extras")
        images = from_union([lambda x: from_list(Image.from_dict, x), from_none], obj.get("images"))
        materials = from_union([lambda x: from_list(Material.from_dict, x), from_none], obj.get("materials"))
        meshes = from_union([lambda x: from_list(Mesh.from_dict, x), from_none], obj.get("meshes"))
        nodes = from_union([lambda x: from_list(Node.from_dict, x), from_none], obj.get("nodes"))
        samplers = from_union([lambda x: from_list(Sampler.from_dict, x), from_none], obj.get("samplers"))
        scene = _opt_int(obj, "scene")
        scenes = from_union([lambda x: from_list(Scene.from_dict, x), from_none], obj.get("scenes"))
        skins = from_union([lambda x: from_list(Skin.from_dict, x), from_none], obj.get("skins"))
        textures = from_union([lambda x: from_list(Texture.from_dict, x), from_none], obj.get("textures"))
        return Gltf(accessors, animations, asset, buffers, buffer_views, cameras, extensions, extensions_required,
                    extensions_used, extras, images, materials, meshes, nodes, samplers, scene, scenes, skins,
                    textures)


def gltf_from_dict(s):
    """Returns the document tree and the messages for dropped optional fields."""
    issues = []
    token = _malformed_fields.set(issues)
    try:
        return Gltf.from_dict(s), issues
    finally:
        _malformed_fields.reset(token)
