# Copyright 2021 United States Government as represented by the Administrator of the National Aeronautics and Space
# Administration.  No copyright is claimed in the United States under Title 17, U.S. Code. All Other Rights Reserved.


"""
This module provides functions for storing a set of cameras in an :mod:`lxml.etree` element and restoring them.

The element produced by :func:`cameras_to_elem` looks like

.. code-block:: xml

    <Cameras>
      <SharedExtrinsics id="1">0.0 0.0 0.0 0.0 0.0 0.0</SharedExtrinsics>
      <Camera extrinsics="1">
        <intrinsics>800.0 1.0 0.0 320.0 240.0 0.0 0.0</intrinsics>
        <shared_to_local_rotation>1.0 0.0 0.0 0.0 1.0 0.0 0.0 0.0 1.0</shared_to_local_rotation>
        <image_size>640 480</image_size>
      </Camera>
    </Cameras>

with one ``SharedExtrinsics`` node per distinct instance and one ``Camera`` node per camera, so cameras forming a rig
are restored bound to the same :class:`.SharedExtrinsics`.  The rotation is stored in row-major order.

Nothing is read from or written to disk here; use :func:`lxml.etree.tostring` and :func:`lxml.etree.parse` on the
element.
"""

import warnings

from typing import Dict, Iterable, List

import numpy as np

import lxml.etree as etree  # nosec

from rigcam.camera_models.camera import Camera
from rigcam.camera_models.intrinsics import INTRINSICS_SIZE
from rigcam.camera_models.shared_extrinsics import EXTRINSICS_SIZE, SharedExtrinsics


__all__ = ['cameras_to_elem', 'cameras_from_elem']


def _format_values(values: Iterable) -> str:
    return ' '.join(repr(v) for v in np.asarray(values).ravel().tolist())


def _parse_values(node: etree._Element, name: str, size: int, dtype: type = float) -> np.ndarray:
    values = np.array((node.text or '').split(), dtype=dtype)

    if values.size != size:
        raise ValueError('{} must contain {} values but {} were found'.format(name, size, values.size))

    return values


def cameras_to_elem(cameras: Iterable[Camera], tag: str = 'Cameras') -> etree._Element:
    """
    Stores cameras in a new :class:`lxml.etree.Element`.

    :param cameras: the cameras to store
    :param tag: the tag of the returned element
    :return: the element holding the cameras
    """

    elem = etree.Element(tag)

    ids: Dict[int, int] = {}

    # the shared nodes go first so that they are defined before being referenced
    cameras = list(cameras)
    for camera in cameras:
        shared = camera.shared_extrinsics
        if id(shared) not in ids:
            ids[id(shared)] = len(ids) + 1
            node = etree.SubElement(elem, 'SharedExtrinsics', attrib={'id': str(ids[id(shared)])})
            node.text = _format_values(shared.extrinsics)

    for camera in cameras:
        camera_elem = etree.SubElement(elem, 'Camera', attrib={'extrinsics': str(ids[id(camera.shared_extrinsics)])})

        etree.SubElement(camera_elem, 'intrinsics').text = _format_values(camera.intrinsics)
        etree.SubElement(camera_elem, 'shared_to_local_rotation').text = _format_values(
            camera.shared_to_local_rotation)
        etree.SubElement(camera_elem, 'image_size').text = '{} {}'.format(camera.image_width, camera.image_height)

    return elem


def cameras_from_elem(elem: etree._Element) -> List[Camera]:
    """
    Restores the cameras stored in an element by :func:`cameras_to_elem`.

    If a camera node is missing one of its value nodes a warning is issued and the default value of a new
    :class:`.Camera` is kept for it.

    :param elem: the element holding the cameras
    :return: the cameras in the order they were stored
    :raises LookupError: if a camera references a ``SharedExtrinsics`` node which doesn't exist
    :raises ValueError: if a node holds the wrong number of values or a SharedExtrinsics id is repeated
    """

    shared: Dict[str, SharedExtrinsics] = {}

    for node in elem.iterfind('SharedExtrinsics'):

        identifier = node.get('id')

        if identifier in shared:
            raise ValueError('The SharedExtrinsics id {} is used more than once'.format(identifier))

        shared[identifier] = SharedExtrinsics(_parse_values(node, 'SharedExtrinsics', EXTRINSICS_SIZE))

    out = []

    for camera_elem in elem.iterfind('Camera'):

        reference = camera_elem.get('extrinsics')

        if reference not in shared:
            raise LookupError('The SharedExtrinsics with id {} could not be found'.format(reference))

        camera = Camera(shared[reference])

        node = camera_elem.find('intrinsics')
        if node is None:
            warnings.warn('missing value for intrinsics')
        else:
            camera.mutable_intrinsics[:] = _parse_values(node, 'intrinsics', INTRINSICS_SIZE)

        node = camera_elem.find('shared_to_local_rotation')
        if node is None:
            warnings.warn('missing value for shared_to_local_rotation')
        else:
            camera.shared_to_local_rotation = _parse_values(node, 'shared_to_local_rotation', 9).reshape(3, 3)

        node = camera_elem.find('image_size')
        if node is None:
            warnings.warn('missing value for image_size')
        else:
            width, height = _parse_values(node, 'image_size', 2, dtype=int)
            camera.set_image_size(int(width), int(height))

        out.append(camera)

    return out
