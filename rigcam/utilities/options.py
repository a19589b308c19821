from dataclasses import dataclass, fields

from typing import Any, Dict

from abc import ABCMeta


@dataclass(eq=False)
class UserOptions(metaclass=ABCMeta):
    """
    Abstract base for the dataclasses holding the tunable settings of a class.

    Each field is a setting and its default.  :class:`.CameraOptions`, for instance, holds the undistortion settings of
    :class:`.Camera`.  Options classes are named ``<ClassName>Options`` and passed to the configured class as its
    ``options`` keyword argument, which copies every field onto the instance with :meth:`apply_options`:

        >>> @dataclass(eq=False)
        ... class SolverOptions(UserOptions):
        ...     max_iterations: int = 50
        >>> class Solver:
        ...     def __init__(self, options=None):
        ...         (SolverOptions() if options is None else options).apply_options(self)
        >>> Solver().max_iterations
        50

    Declare subclasses with ``eq=False`` so the configured classes keep identity based equality and hashing.
    """

    def override_options(self):
        """
        This method is used for special cases when certain options should be overwritten before they are applied
        """
        pass

    def apply_options(self, target: object) -> None:
        """
        Update the options as attributes of the target object

        :param target: the instance that we are to update
        """
        for key, value in self.options_dict.items():
            setattr(target, key, value)

    @property
    def options_dict(self) -> Dict[str, Any]:
        """
        The options declared as fields of the dataclass mapped to their current values.
        """

        self.override_options()
        return {field.name: getattr(self, field.name) for field in fields(self)}
