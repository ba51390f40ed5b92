# Routes package init
"""
Courseware Backend — API Routes Package
=========================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - resources.py: build_resource_router() — the generic three-route table
    - courses.py:   POST /api/courses, GET /api/courses, GET /api/courses/{id}
    - health.py:    GET  /health

Routes are thin: they pull the service from a dependency, call one
operation, and let the global exception handlers format failures.
"""
