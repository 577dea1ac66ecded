"""
Top‑level package for the Frame Studio API.

This file makes ``frame_studio_api`` a Python package so that modules
within ``app`` can be imported using fully qualified names like
``frame_studio_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
