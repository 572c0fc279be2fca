# Services package init
"""
Tutorial API - Services Layer
=============================

What:  Data access sitting between routes (HTTP) and MongoDB (persistence).

Service Inventory:
    - TutorialService: CRUD over the `tutorials` collection

Services take their collection handle in the constructor and are built per
request by a FastAPI dependency, so tests can hand them a mocked collection.
"""
