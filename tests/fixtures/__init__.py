"""Shared pytest fixtures for catalog tests."""

from .core import *  # noqa: F401,F403
from .search import *  # noqa: F401,F403
