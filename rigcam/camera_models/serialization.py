# Copyright 2021 United States Government as represented by the Administrator of the National Aeronautics and Space
# Administration.  No copyright is claimed in the United States under Title 17, U.S. Code. All Other Rights Reserved.


"""
This module provides a compact little-endian binary format for :class:`.Camera` and :class:`.SharedExtrinsics`
instances which preserves the sharing of extrinsics between cameras.

Format
------

All values are little-endian.  A :class:`.SharedExtrinsics` is stored as its 6 parameters (``float64``).  A
:class:`.Camera` is stored as

============================== =================================================================================
Field                          Layout
============================== =================================================================================
intrinsics                     7 ``float64`` in :class:`.IntrinsicsIndex` order
shared extrinsics reference    1 ``uint32`` id.  The first time an instance is written to an archive the id has
                               its most significant bit set and is followed by the 6 ``float64`` extrinsics.
                               Later references to the same instance write only the bare id.  Id 0 is the null
                               reference and is never valid for a camera.
shared to local rotation       9 ``float64`` in column-major order
image size                     2 ``int32``, the width then the height
============================== =================================================================================

:func:`dumps` writes a ``uint32`` camera count followed by each camera.

The id registry lives in the archive objects, so every camera written through the same
:class:`BinaryOutputArchive` keeps its sharing when read back through one :class:`BinaryInputArchive`:

    >>> from rigcam.camera_models import Camera, SharedExtrinsics, dumps, loads
    >>> rig = SharedExtrinsics()
    >>> left, right = loads(dumps([Camera(rig), Camera(rig)]))
    >>> left.shared_extrinsics is right.shared_extrinsics
    True

Options (:class:`.CameraOptions`) are runtime configuration and are not stored.
"""

import io

from typing import BinaryIO, Dict, Iterable, List, Optional, Tuple

import numpy as np

from rigcam._typing import ARRAY_LIKE, DOUBLE_ARRAY
from rigcam.camera_models.camera import Camera
from rigcam.camera_models.intrinsics import INTRINSICS_SIZE
from rigcam.camera_models.shared_extrinsics import EXTRINSICS_SIZE, SharedExtrinsics


__all__ = ['SerializationError', 'BinaryOutputArchive', 'BinaryInputArchive',
           'encode_shared_extrinsics', 'decode_shared_extrinsics', 'encode_camera', 'decode_camera',
           'dumps', 'loads']


NEW_REFERENCE_FLAG: int = 0x80000000
"""
The bit set on a reference id the first time the referenced instance is written.
"""

NULL_REFERENCE: int = 0
"""
The reference id which refers to no instance.
"""

_FLOAT = '<f8'
_UINT = '<u4'
_INT = '<i4'


class SerializationError(ValueError):
    """
    Raised when binary camera data is truncated or malformed.
    """


class BinaryOutputArchive:
    """
    Writes values to a binary stream and assigns ids to the shared instances written through it.
    """

    def __init__(self, stream: Optional[BinaryIO] = None):
        """
        :param stream: The writable binary stream to write to.  If ``None`` an in memory buffer is used (retrieve the
                       contents with :meth:`getvalue`).
        """

        self.stream: BinaryIO = io.BytesIO() if stream is None else stream

        # keyed by id() so the registry holds the instances to keep the keys from being reused
        self._registry: Dict[int, Tuple[SharedExtrinsics, int]] = {}

    def write_array(self, values: ARRAY_LIKE, dtype: str):
        """
        Writes the values to the stream as a flat array of the requested dtype.

        :param values: the values to write
        :param dtype: the numpy dtype string to write the values as (including the byte order)
        """

        self.stream.write(np.ascontiguousarray(values, dtype=dtype).tobytes())

    def write_reference(self, instance: SharedExtrinsics) -> bool:
        """
        Writes the reference id for an instance.

        :param instance: the instance being referenced
        :return: ``True`` if this is the first reference to the instance (and therefore its contents must follow)
        """

        entry = self._registry.get(id(instance))

        if entry is not None:
            self.write_array([entry[1]], _UINT)
            return False

        reference_id = len(self._registry) + 1

        if reference_id >= NEW_REFERENCE_FLAG:
            raise SerializationError('Too many shared instances in a single archive')

        self._registry[id(instance)] = (instance, reference_id)

        self.write_array([reference_id | NEW_REFERENCE_FLAG], _UINT)

        return True

    def getvalue(self) -> bytes:
        """
        Returns the bytes written so far when the archive writes to an in memory buffer.

        :raises TypeError: if the archive writes to a stream that cannot report its contents (such as a file)
        """

        if not hasattr(self.stream, 'getvalue'):
            raise TypeError('getvalue is only available when writing to an in memory buffer, not to {}'.format(
                type(self.stream).__name__))

        return self.stream.getvalue()


class BinaryInputArchive:
    """
    Reads values from a binary stream and resolves the shared instance ids written by a :class:`BinaryOutputArchive`.
    """

    def __init__(self, data: bytes | BinaryIO):
        """
        :param data: The bytes to read or a readable binary stream
        """

        self.stream: BinaryIO = io.BytesIO(data) if isinstance(data, (bytes, bytearray, memoryview)) else data

        self._registry: Dict[int, SharedExtrinsics] = {}

    def read_array(self, dtype: str, count: int) -> np.ndarray:
        """
        Reads a flat array of count values of the requested dtype from the stream.

        :param dtype: the numpy dtype string to read (including the byte order)
        :param count: the number of values to read
        :return: the values as a new native array
        :raises SerializationError: if the stream ends before count values are read
        """

        dtype = np.dtype(dtype)

        buffer = self.stream.read(dtype.itemsize * count)

        if len(buffer) != dtype.itemsize * count:
            raise SerializationError('Unexpected end of data: expected {} bytes but only {} remain'.format(
                dtype.itemsize * count, len(buffer)))

        return np.frombuffer(buffer, dtype=dtype, count=count).astype(dtype.newbyteorder('='))

    def read_reference(self) -> Tuple[int, bool]:
        """
        Reads a reference id.

        :return: the bare id and whether the contents of the referenced instance follow
        :raises SerializationError: for the null reference or a reference to an instance that has not been read yet
        """

        raw_id = int(self.read_array(_UINT, 1)[0])

        is_new = bool(raw_id & NEW_REFERENCE_FLAG)
        reference_id = raw_id & ~NEW_REFERENCE_FLAG

        if reference_id == NULL_REFERENCE:
            raise SerializationError('A camera must reference shared extrinsics but a null reference was read')

        if is_new and reference_id in self._registry:
            raise SerializationError('Shared extrinsics {} were defined more than once'.format(reference_id))

        if not is_new and reference_id not in self._registry:
            raise SerializationError('Shared extrinsics {} were referenced before being defined'.format(reference_id))

        return reference_id, is_new

    def register(self, reference_id: int, instance: SharedExtrinsics):
        """
        Records the instance read for a reference id.
        """

        self._registry[reference_id] = instance

    def lookup(self, reference_id: int) -> SharedExtrinsics:
        """
        Returns the instance previously read for a reference id.
        """

        return self._registry[reference_id]

    def at_end(self) -> bool:
        """
        Returns whether all of the data has been consumed.
        """

        position = self.stream.tell()
        remaining = self.stream.read(1)
        self.stream.seek(position)

        return not remaining


def encode_shared_extrinsics(archive: BinaryOutputArchive, shared_extrinsics: SharedExtrinsics):
    """
    Writes the 6 parameters of a :class:`.SharedExtrinsics` to the archive.
    """

    archive.write_array(shared_extrinsics.extrinsics, _FLOAT)


def decode_shared_extrinsics(archive: BinaryInputArchive) -> SharedExtrinsics:
    """
    Reads a new :class:`.SharedExtrinsics` from the archive.
    """

    return SharedExtrinsics(archive.read_array(_FLOAT, EXTRINSICS_SIZE))


def encode_camera(archive: BinaryOutputArchive, camera: Camera):
    """
    Writes a :class:`.Camera` to the archive.

    The shared extrinsics are written in full only the first time they are encountered in this archive.
    """

    archive.write_array(camera.intrinsics, _FLOAT)

    if archive.write_reference(camera.shared_extrinsics):
        encode_shared_extrinsics(archive, camera.shared_extrinsics)

    archive.write_array(camera.shared_to_local_rotation.ravel(order='F'), _FLOAT)

    archive.write_array([camera.image_width, camera.image_height], _INT)


def decode_camera(archive: BinaryInputArchive) -> Camera:
    """
    Reads a :class:`.Camera` from the archive.

    A camera referencing shared extrinsics already read through this archive is bound to the same
    :class:`.SharedExtrinsics` instance.

    :raises SerializationError: if the data is truncated or contains an invalid reference
    """

    intrinsics = archive.read_array(_FLOAT, INTRINSICS_SIZE)

    reference_id, is_new = archive.read_reference()

    if is_new:
        shared_extrinsics = decode_shared_extrinsics(archive)
        archive.register(reference_id, shared_extrinsics)
    else:
        shared_extrinsics = archive.lookup(reference_id)

    shared_to_local_rotation: DOUBLE_ARRAY = archive.read_array(_FLOAT, 9).reshape((3, 3), order='F')

    image_size = archive.read_array(_INT, 2)

    camera = Camera(shared_extrinsics)
    camera.mutable_intrinsics[:] = intrinsics
    camera.shared_to_local_rotation = shared_to_local_rotation
    camera.set_image_size(int(image_size[0]), int(image_size[1]))

    return camera


def dumps(cameras: Iterable[Camera]) -> bytes:
    """
    Serializes cameras to bytes, preserving which of them share extrinsics.

    :param cameras: the cameras to serialize
    :return: the serialized bytes
    """

    cameras = list(cameras)

    archive = BinaryOutputArchive()

    archive.write_array([len(cameras)], _UINT)

    for camera in cameras:
        encode_camera(archive, camera)

    return archive.getvalue()


def loads(data: bytes) -> List[Camera]:
    """
    Deserializes cameras written by :func:`dumps`.

    :param data: the serialized bytes
    :return: the cameras in the order they were written
    :raises SerializationError: if the data is truncated, malformed, or has trailing bytes
    """

    archive = BinaryInputArchive(data)

    count = int(archive.read_array(_UINT, 1)[0])

    cameras = [decode_camera(archive) for _ in range(count)]

    if not archive.at_end():
        raise SerializationError('Unexpected trailing data after {} cameras'.format(count))

    return cameras
