"""Module-level demo instance, built once when the module is first imported."""

from .demo import DemoResource

INSTANCE = DemoResource()
