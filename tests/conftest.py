"""Test bootstrap: put the repository root on ``sys.path``.

The project uses flat top-level packages (``core``, ``ecs``, ``entities``...)
imported absolutely, as well as ``tests.helpers``.
"""
import os
import sys

import pytest

PACKAGE_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if PACKAGE_ROOT not in sys.path:
    sys.path.insert(0, PACKAGE_ROOT)

from entities.static_tables import load_static_tables  # noqa: E402


@pytest.fixture(scope="session")
def default_tables():
    """Static tables shipped in ``entities/default_entities``."""

    return load_static_tables()
