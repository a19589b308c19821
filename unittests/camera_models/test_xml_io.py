from unittest import TestCase

import numpy as np

import lxml.etree as etree

from rigcam.camera_models import Camera, SharedExtrinsics, cameras_to_elem, cameras_from_elem
from rigcam.rotations import rot_x, rot_z


def make_camera(shared_extrinsics=None):

    camera = Camera() if shared_extrinsics is None else Camera(shared_extrinsics)

    camera.focal_length = 1000.1
    camera.aspect_ratio = 0.99
    camera.skew = 0.3
    camera.set_principal_point(512.5, 384.25)
    camera.set_radial_distortion(0.01, -0.002)
    camera.set_image_size(1024, 768)
    camera.position = [0.1, 0.2, 0.3]
    camera.set_orientation_from_angle_axis([0.3, 0.2, 0.1])

    return camera


class TestCamerasToElem(TestCase):

    def test_structure(self):

        rig = SharedExtrinsics()

        cameras = [make_camera(rig), make_camera(rig), make_camera()]

        elem = cameras_to_elem(cameras)

        self.assertEqual(elem.tag, 'Cameras')
        self.assertEqual(len(elem.findall('SharedExtrinsics')), 2)
        self.assertEqual(len(elem.findall('Camera')), 3)

        references = [node.get('extrinsics') for node in elem.findall('Camera')]

        self.assertEqual(references[0], references[1])
        self.assertNotEqual(references[0], references[2])

        self.assertEqual(elem.find('Camera/image_size').text, '1024 768')

        self.assertEqual(cameras_to_elem([], tag='Rig').tag, 'Rig')


class TestCamerasFromElem(TestCase):

    def test_round_trip(self):

        rig = SharedExtrinsics()

        left = make_camera(rig)
        right = make_camera(rig)
        right.shared_to_local_rotation = rot_x(0.5) @ rot_z(-0.25)
        alone = make_camera()

        # through text to make sure nothing is lost
        text = etree.tostring(cameras_to_elem([left, right, alone]))

        restored = cameras_from_elem(etree.fromstring(text))

        self.assertEqual(len(restored), 3)
        self.assertIs(restored[0].shared_extrinsics, restored[1].shared_extrinsics)
        self.assertIsNot(restored[0].shared_extrinsics, restored[2].shared_extrinsics)

        for original, copy in zip([left, right, alone], restored):

            np.testing.assert_array_equal(copy.intrinsics, original.intrinsics)
            np.testing.assert_array_equal(copy.extrinsics.extrinsics, original.extrinsics.extrinsics)
            np.testing.assert_array_equal(copy.shared_to_local_rotation, original.shared_to_local_rotation)
            self.assertEqual(copy.image_width, original.image_width)
            self.assertEqual(copy.image_height, original.image_height)

    def test_missing_reference(self):

        elem = cameras_to_elem([make_camera()])

        elem.remove(elem.find('SharedExtrinsics'))

        with self.assertRaises(LookupError):
            cameras_from_elem(elem)

    def test_missing_value(self):

        elem = cameras_to_elem([make_camera()])

        camera_elem = elem.find('Camera')
        camera_elem.remove(camera_elem.find('image_size'))

        with self.assertWarns(UserWarning):
            restored = cameras_from_elem(elem)

        self.assertEqual(restored[0].image_width, 0)
        self.assertEqual(restored[0].focal_length, 1000.1)

    def test_wrong_size(self):

        elem = cameras_to_elem([make_camera()])

        elem.find('Camera/intrinsics').text = '1 2 3'

        with self.assertRaises(ValueError):
            cameras_from_elem(elem)

    def test_duplicate_id(self):

        elem = cameras_to_elem([make_camera()])

        original = elem.find('SharedExtrinsics')

        duplicate = etree.SubElement(elem, 'SharedExtrinsics', attrib={'id': original.get('id')})
        duplicate.text = '0 0 0 0 0 0'

        with self.assertRaises(ValueError):
            cameras_from_elem(elem)
