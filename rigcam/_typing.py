from typing import Union

import numpy as np
import numpy.typing as npt

DOUBLE_ARRAY = npt.NDArray[np.float64]
ARRAY_LIKE = npt.ArrayLike
F_SCALAR_OR_ARRAY = Union[float, DOUBLE_ARRAY]

NONEARRAY = Union[npt.NDArray, None]
