"""Core patterns module.

Provides the class-based singleton built on top of LazySlot.
"""

from .singleton import ThreadSafeSingleton

__all__ = ["ThreadSafeSingleton"]
