"""
Tutorial API - Application Package
==================================

What: CRUD backend for the "tutorial" resource, served by FastAPI and stored in MongoDB.
How:  `python -m tutorial_api` or `uvicorn tutorial_api.main:app`.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Services (Data Access Layer)    │  ← Collection operations
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← Document mapping + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Motor client lifecycle
    └─────────────────────────────────────┘

    Routes never touch the collection directly; they receive a
    TutorialService through FastAPI dependencies, and the service receives
    the collection handle from the MongoDatabase opened in the lifespan.
"""

__version__ = "1.0.0"
