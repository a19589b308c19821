"""
This module provides the :class:`UserOptionConfigured` mixin which applies a :class:`.UserOptions` dataclass to the
instances of a class and remembers it so that :meth:`~UserOptionConfigured.reset_settings` can undo later changes.

:class:`.Camera` is configured this way by :class:`.CameraOptions`::

    >>> from rigcam.camera_models import Camera, CameraOptions
    >>> camera = Camera(options=CameraOptions(undistortion_iterations=20))
    >>> camera.undistortion_iterations = 5
    >>> camera.reset_settings()
    >>> camera.undistortion_iterations
    20

A new configurable class lists the mixin first and its options class second, and passes the options type to the
mixin::

    class RefinedCamera(UserOptionConfigured[RefinedCameraOptions], RefinedCameraOptions):
        def __init__(self, options: RefinedCameraOptions | None = None):
            super().__init__(RefinedCameraOptions, options=options)
"""

import copy

from typing import Generic, TypeVar

from rigcam.utilities.options import UserOptions


OptionsT = TypeVar("OptionsT", bound=UserOptions)
"""
Type variable bound to UserOptions for type safety
"""


class UserOptionConfigured(Generic[OptionsT]):
    """
    Mixin class providing UserOptions-based configuration with reset capability.

    The options given at initialization (or the defaults of ``options_type`` when none are given) are applied as
    attributes of the instance and a copy of them is kept so that :meth:`reset_settings` can restore them later.
    """

    def __init__(self, options_type: type[OptionsT], *args, options: OptionsT | None = None, **kwargs) -> None:
        """
        :param options_type: The type of the :class:`.UserOptions` to use
        :param options: An optional instance of `options_type` preconfigured.
        """

        super().__init__(*args, **kwargs)

        if options is None:
            options = options_type()

        options.apply_options(self)

        self._original_options: OptionsT = copy.deepcopy(options)
        """
        The original configuration for this class
        """

    def reset_settings(self) -> None:
        """
        Resets the options of the class to the state it was originally initialized with.
        """

        self._original_options.apply_options(self)

    @property
    def original_options(self) -> OptionsT:
        """
        The options used during initialization.
        """
        return self._original_options
