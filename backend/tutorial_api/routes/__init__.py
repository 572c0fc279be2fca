# Routes package init
"""
Tutorial API - Routes Package
=============================

Route Inventory:
    - tutorials.py:  /tutorials CRUD endpoints
    - health.py:     GET /health (database probe)

Routes are thin: they parse input, call TutorialService, and return the
result. Status codes for failures come from the global exception handlers.
"""
