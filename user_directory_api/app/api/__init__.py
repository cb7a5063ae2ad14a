"""
API package containing versioned routes.

Each version subpackage (currently only ``v1``) exposes a top‑level
``router`` that includes its domain‑specific endpoints; ``app.main``
mounts it under ``/api/<version>``.
"""
