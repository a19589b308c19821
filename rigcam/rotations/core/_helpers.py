import numpy as np

from rigcam._typing import ARRAY_LIKE, DOUBLE_ARRAY


def _check_array_and_shape(input: ARRAY_LIKE, shape: tuple[int, ...], name: str) -> DOUBLE_ARRAY:
    array = np.array(input, dtype=np.float64)

    if array.shape != shape:
        raise ValueError(f'The {name} must have shape {shape}, got {array.shape}')

    return array


def _check_vector_array_and_shape(vector: ARRAY_LIKE) -> DOUBLE_ARRAY:
    return _check_array_and_shape(vector, (3,), 'vector')


def _check_quaternion_array_and_shape(quaternion: ARRAY_LIKE) -> DOUBLE_ARRAY:
    return _check_array_and_shape(quaternion, (4,), 'quaternion')


def _check_matrix_array_and_shape(matrix: ARRAY_LIKE) -> DOUBLE_ARRAY:
    return _check_array_and_shape(matrix, (3, 3), 'matrix')
