"""
Application package initializer.

The project is organised into layers.  ``models`` holds the plain
entity dataclasses, ``repositories`` the query layer over SQLite,
``services`` the business rules (validation, uniqueness, caching,
DTO mapping), ``schemas`` the pydantic request/response models and
``api`` the versioned FastAPI routers.  ``core`` contains the
cross‑cutting pieces: configuration, logging, database access,
security and the response cache.

Importing ``app`` here is deliberately avoided so that the core layers
can be used (and tested) without constructing the web application.
Use ``user_directory_api.app.main:app`` to serve the API.
"""
