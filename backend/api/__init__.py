"""
Payments portal API package.

The application is built by ``api.app.create_app``; run it with
``run_api.py``.
"""
