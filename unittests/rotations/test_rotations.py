from unittest import TestCase

import numpy as np

from rigcam import rotations as at


ROTMAT_123 = np.array([[-0.69492056, 0.71352099, 0.08929286],
                       [-0.19200697, -0.30378504, 0.93319235],
                       [0.69297817, 0.6313497, 0.34810748]])

QUATERNION_123 = np.array([0.25532186, 0.51064372, 0.76596558, -0.29555113])


class TestAngleAxisToRotMat(TestCase):

    def test_angle_axis_to_rotmat(self):

        rotmat = at.angle_axis_to_rotmat([0, 0, 0])

        np.testing.assert_array_equal(rotmat, np.eye(3))

        rotmat = at.angle_axis_to_rotmat([np.pi, 0, 0])

        np.testing.assert_array_almost_equal(rotmat, [[1, 0, 0], [0, -1, 0], [0, 0, -1]])

        rotmat = at.angle_axis_to_rotmat([0, np.pi, 0])

        np.testing.assert_array_almost_equal(rotmat, [[-1, 0, 0], [0, 1, 0], [0, 0, -1]])

        rotmat = at.angle_axis_to_rotmat([0, 0, np.pi])

        np.testing.assert_array_almost_equal(rotmat, [[-1, 0, 0], [0, -1, 0], [0, 0, 1]])

        rotmat = at.angle_axis_to_rotmat([np.pi / 2, 0, 0])

        np.testing.assert_array_almost_equal(rotmat, [[1, 0, 0], [0, 0, -1], [0, 1, 0]])

        rotmat = at.angle_axis_to_rotmat([1, 2, 3])

        np.testing.assert_array_almost_equal(rotmat, ROTMAT_123)

        with self.assertRaises(ValueError):
            at.angle_axis_to_rotmat([1, 2])

        with self.assertRaises(ValueError):
            at.angle_axis_to_rotmat([[1], [2], [3]])


class TestAngleAxisToQuaternion(TestCase):

    def test_angle_axis_to_quaternion(self):

        q = at.angle_axis_to_quaternion([0, 0, 0])

        np.testing.assert_array_equal(q, [0, 0, 0, 1])

        q = at.angle_axis_to_quaternion([np.pi, 0, 0])

        np.testing.assert_array_almost_equal(q, [1, 0, 0, 0])

        q = at.angle_axis_to_quaternion([0, 0, np.pi])

        np.testing.assert_array_almost_equal(q, [0, 0, 1, 0])

        q = at.angle_axis_to_quaternion([1, 2, 3])

        np.testing.assert_array_almost_equal(q, QUATERNION_123)


class TestQuaternionToRotMat(TestCase):

    def test_quaternion_to_rotmat(self):

        rotmat = at.quaternion_to_rotmat([0, 0, 0, 1])

        np.testing.assert_array_almost_equal(rotmat, np.eye(3))

        rotmat = at.quaternion_to_rotmat([0, 1, 0, 0])

        np.testing.assert_array_almost_equal(rotmat, [[-1, 0, 0], [0, 1, 0], [0, 0, -1]])

        rotmat = at.quaternion_to_rotmat([0, 0, np.sqrt(2) / 2, np.sqrt(2) / 2])

        np.testing.assert_array_almost_equal(rotmat, [[0, -1, 0], [1, 0, 0], [0, 0, 1]])

        rotmat = at.quaternion_to_rotmat(QUATERNION_123)

        np.testing.assert_array_almost_equal(rotmat, ROTMAT_123)

        # the quaternion is normalized first
        rotmat = at.quaternion_to_rotmat([0, 0, 2, 2])

        np.testing.assert_array_almost_equal(rotmat, [[0, -1, 0], [1, 0, 0], [0, 0, 1]])

        # q and -q are the same rotation
        np.testing.assert_array_almost_equal(at.quaternion_to_rotmat(-QUATERNION_123), ROTMAT_123)


class TestQuaternionToAngleAxis(TestCase):

    def test_quaternion_to_angle_axis(self):

        rvec = at.quaternion_to_angle_axis([1, 0, 0, 0])

        np.testing.assert_array_almost_equal(rvec, [np.pi, 0, 0])

        rvec = at.quaternion_to_angle_axis([0, 0, 1, 0])

        np.testing.assert_array_almost_equal(rvec, [0, 0, np.pi])

        rvec = at.quaternion_to_angle_axis([0, 0, 0, 1])

        np.testing.assert_array_equal(rvec, [0, 0, 0])

        rvec = at.quaternion_to_angle_axis([0, 0, 0, -1])

        np.testing.assert_array_equal(rvec, [0, 0, 0])

        # the angle is always reduced to [0, pi]
        rvec = at.quaternion_to_angle_axis(QUATERNION_123)

        np.testing.assert_array_almost_equal(rvec, np.array([1, 2, 3]) * (1 - 2 * np.pi / np.sqrt(14)))

        rvec = at.quaternion_to_angle_axis(-QUATERNION_123)

        np.testing.assert_array_almost_equal(rvec, np.array([1, 2, 3]) * (1 - 2 * np.pi / np.sqrt(14)))

    def test_small_angle(self):

        rvec = at.quaternion_to_angle_axis(at.angle_axis_to_quaternion([1e-9, -2e-9, 3e-9]))

        np.testing.assert_allclose(rvec, [1e-9, -2e-9, 3e-9], rtol=1e-6)


class TestRotMatToQuaternion(TestCase):

    def test_rotmat_to_quaternion(self):

        q = at.rotmat_to_quaternion(np.eye(3))

        np.testing.assert_allclose(q, [0, 0, 0, 1], atol=1e-16)

        q = at.rotmat_to_quaternion(np.array([[-1., 0, 0], [0, 1, 0], [0, 0, -1]]))

        np.testing.assert_allclose(np.abs(q), [0, 1, 0, 0], atol=1e-16)

        q = at.rotmat_to_quaternion(np.array([[1., 0, 0], [0, -1, 0], [0, 0, -1]]))

        np.testing.assert_allclose(np.abs(q), [1, 0, 0, 0], atol=1e-16)

        q = at.rotmat_to_quaternion(np.array([[-1., 0, 0], [0, -1, 0], [0, 0, 1]]))

        np.testing.assert_allclose(np.abs(q), [0, 0, 1, 0], atol=1e-16)

        q = at.rotmat_to_quaternion([[0, 1, 0], [-1, 0, 0], [0, 0, 1]])

        np.testing.assert_allclose(q, [0, 0, -np.sqrt(2) / 2, np.sqrt(2) / 2], atol=1e-16)

        # the scalar component is made non-negative
        q = at.rotmat_to_quaternion(ROTMAT_123)

        np.testing.assert_array_almost_equal(q, -QUATERNION_123)

        with self.assertRaises(ValueError):
            at.rotmat_to_quaternion([1, 2, 3])

        with self.assertRaises(ValueError):
            at.rotmat_to_quaternion([[1, 2, 3]])

        with self.assertRaises(ValueError):
            at.rotmat_to_quaternion([np.eye(3)] * 2)


class TestRotMatToAngleAxis(TestCase):

    def test_rotmat_to_angle_axis(self):

        rvec = at.rotmat_to_angle_axis(np.eye(3))

        np.testing.assert_array_equal(rvec, [0, 0, 0])

        rvec = at.rotmat_to_angle_axis([[1, 0, 0], [0, 0, -1], [0, 1, 0]])

        np.testing.assert_array_almost_equal(rvec, [np.pi / 2, 0, 0])

        rvec = at.rotmat_to_angle_axis([[-1, 0, 0], [0, -1, 0], [0, 0, 1]])

        np.testing.assert_array_almost_equal(np.abs(rvec), [0, 0, np.pi])

    def test_round_trip(self):

        for angle_axis in [[0.1, -0.2, 0.3], [1, 0.5, -0.25], [0, 0, 3], [-2, 1, 0.5]]:

            with self.subTest(angle_axis=angle_axis):

                rotmat = at.angle_axis_to_rotmat(angle_axis)

                np.testing.assert_array_almost_equal(at.angle_axis_to_rotmat(at.rotmat_to_angle_axis(rotmat)), rotmat)


class TestRotX(TestCase):

    def test_rot_x(self):

        angles = [3 * np.pi / 2, np.pi, np.pi / 2, np.pi / 3, 0,
                  -3 * np.pi / 2, -np.pi, -np.pi / 2, -np.pi / 3]

        mats = [[[1, 0, 0], [0, 0, 1], [0, -1, 0]],
                [[1, 0, 0], [0, -1, 0], [0, 0, -1]],
                [[1, 0, 0], [0, 0, -1], [0, 1, 0]],
                [[1, 0, 0], [0, 0.5, -np.sqrt(3) / 2], [0, np.sqrt(3) / 2, 0.5]],
                [[1, 0, 0], [0, 1, 0], [0, 0, 1]],
                [[1, 0, 0], [0, 0, -1], [0, 1, 0]],
                [[1, 0, 0], [0, -1, 0], [0, 0, -1]],
                [[1, 0, 0], [0, 0, 1], [0, -1, 0]],
                [[1, 0, 0], [0, 0.5, np.sqrt(3) / 2], [0, -np.sqrt(3) / 2, 0.5]]]

        for angle, solu in zip(angles, mats):

            with self.subTest(angle=angle):

                np.testing.assert_almost_equal(at.rot_x(angle), solu)


class TestRotY(TestCase):

    def test_rot_y(self):

        srt3d2 = np.sqrt(3) / 2

        angles = [np.pi, np.pi / 2, np.pi / 3, 0, -np.pi / 3]

        mats = [[[-1, 0, 0], [0, 1, 0], [0, 0, -1]],
                [[0, 0, 1], [0, 1, 0], [-1, 0, 0]],
                [[0.5, 0, srt3d2], [0, 1, 0], [-srt3d2, 0, 0.5]],
                [[1, 0, 0], [0, 1, 0], [0, 0, 1]],
                [[0.5, 0, -srt3d2], [0, 1, 0], [srt3d2, 0, 0.5]]]

        for angle, solu in zip(angles, mats):

            with self.subTest(angle=angle):

                np.testing.assert_almost_equal(at.rot_y(angle), solu)


class TestRotZ(TestCase):

    def test_rot_z(self):

        srt3d2 = np.sqrt(3) / 2

        angles = [np.pi, np.pi / 2, np.pi / 3, 0, -np.pi / 3]

        mats = [[[-1, 0, 0], [0, -1, 0], [0, 0, 1]],
                [[0, -1, 0], [1, 0, 0], [0, 0, 1]],
                [[0.5, -srt3d2, 0], [srt3d2, 0.5, 0], [0, 0, 1]],
                [[1, 0, 0], [0, 1, 0], [0, 0, 1]],
                [[0.5, srt3d2, 0], [-srt3d2, 0.5, 0], [0, 0, 1]]]

        for angle, solu in zip(angles, mats):

            with self.subTest(angle=angle):

                np.testing.assert_almost_equal(at.rot_z(angle), solu)

    def test_elementals_match_angle_axis(self):

        np.testing.assert_array_almost_equal(at.rot_x(0.3), at.angle_axis_to_rotmat([0.3, 0, 0]))
        np.testing.assert_array_almost_equal(at.rot_y(0.3), at.angle_axis_to_rotmat([0, 0.3, 0]))
        np.testing.assert_array_almost_equal(at.rot_z(0.3), at.angle_axis_to_rotmat([0, 0, 0.3]))


class TestSkew(TestCase):

    def test_skew(self):

        skew_mat = at.skew([1, 2, 3])

        np.testing.assert_array_equal(skew_mat, [[0, -3, 2], [3, 0, -1], [-2, 1, 0]])

        np.testing.assert_array_almost_equal(skew_mat @ [4, 5, 6], np.cross([1, 2, 3], [4, 5, 6]))
