"""
HotTakes API
=============

REST backend for the HotTakes sauce review application: signup and login,
sauce CRUD with an image per sauce, and like/dislike voting.

Layers:
    routes/      HTTP handlers (FastAPI routers)
    services/    pipeline stages and domain logic
    models/      SQLAlchemy ORM models
    schemas/     pydantic request/response contracts
    middleware/  request ids and access logging
"""

__version__ = "1.0.0"
