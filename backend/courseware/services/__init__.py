# Services package init
"""
Courseware Backend — Services Layer
=====================================

What:  Resource logic sitting between routes (HTTP) and persistence.

Service Inventory:
    - ResourceStore (abstract): Storage collaborator contract (find_all / find_by_id / insert)
    - SQLAlchemyResourceStore:  ResourceStore over an async SQLAlchemy session
    - ResourceService:          The handler set (list / get_by_id / create) for one resource

Services never see HTTP objects, so they are tested directly with an
in-memory store and wired into routes through FastAPI dependencies.
"""
