"""
Application package initializer.

This package contains the main entrypoint for the API and all of its
submodules: ``core`` (configuration, logging, database, sessions and
cache signals), ``schemas``, ``services``, ``templates`` and the
versioned ``api`` routers.
"""

from .main import app  # noqa: F401
