from unittest import TestCase

from dataclasses import dataclass

from rigcam.utilities.options import UserOptions
from rigcam.utilities.mixin_classes import UserOptionConfigured


@dataclass(eq=False)
class ExampleOptions(UserOptions):
    gain: float = 2.0
    iterations: int = 10


@dataclass(eq=False)
class ClampedOptions(UserOptions):
    iterations: int = 10

    def override_options(self):
        self.iterations = max(self.iterations, 1)


class Example(UserOptionConfigured[ExampleOptions], ExampleOptions):

    def __init__(self, options: ExampleOptions | None = None):
        super().__init__(ExampleOptions, options=options)


class TestUserOptions(TestCase):

    def test_options_dict(self):

        self.assertEqual(ExampleOptions().options_dict, {'gain': 2.0, 'iterations': 10})
        self.assertEqual(ExampleOptions(gain=3.0).options_dict, {'gain': 3.0, 'iterations': 10})

    def test_apply_options(self):

        class Target:
            pass

        target = Target()

        ExampleOptions(iterations=4).apply_options(target)

        self.assertEqual(target.gain, 2.0)
        self.assertEqual(target.iterations, 4)

    def test_override_options(self):

        self.assertEqual(ClampedOptions(iterations=-5).options_dict, {'iterations': 1})


class TestUserOptionConfigured(TestCase):

    def test_defaults(self):

        inst = Example()

        self.assertEqual(inst.gain, 2.0)
        self.assertEqual(inst.iterations, 10)

    def test_options(self):

        options = ExampleOptions(gain=5.0)

        inst = Example(options)

        self.assertEqual(inst.gain, 5.0)

        # the instance keeps its own copy
        options.gain = 7.0
        self.assertEqual(inst.original_options.gain, 5.0)

    def test_reset_settings(self):

        inst = Example(ExampleOptions(iterations=3))

        inst.iterations = 50
        inst.gain = -1.0

        inst.reset_settings()

        self.assertEqual(inst.iterations, 3)
        self.assertEqual(inst.gain, 2.0)

    def test_identity_equality(self):

        self.assertNotEqual(Example(), Example())

        inst = Example()
        self.assertEqual(inst, inst)
        self.assertEqual(len({inst, inst}), 1)
