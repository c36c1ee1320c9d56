"""Library package for the level thumbnail service.

This package contains the proportional compositor, the background image
loader, the cached asset store and the fixed thumbnail layout used by the
API endpoint in ``main.py``. See individual modules for details.
"""
