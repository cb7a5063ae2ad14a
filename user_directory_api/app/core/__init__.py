"""
Cross‑cutting infrastructure: settings, logging, SQLite access,
password hashing and authentication, the response cache and the
domain exceptions.
"""
