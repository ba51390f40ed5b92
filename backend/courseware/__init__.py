"""
Courseware Backend — Application Package Initializer
====================================================

What: Marks the `courseware` directory as a Python package.
Who:  Used by pytest, uvicorn (`courseware.main:app`) and API consumers that
      import the client (`from courseware.client import course_client`).

Architecture Note:
    The package wires one resource (Course) through three layers that any
    future resource can reuse:

    ┌─────────────────────────────────────┐
    │   Routes (HTTP verbs → operations)  │  ← status codes, envelopes
    ├─────────────────────────────────────┤
    │   ResourceService (handler set)     │  ← list / get_by_id / create
    ├─────────────────────────────────────┤
    │   ResourceStore (storage contract)  │  ← find_all / find_by_id / insert
    ├─────────────────────────────────────┤
    │   ResourceDefinition (schema)       │  ← fields + Valid | Invalid
    └─────────────────────────────────────┘

    ResourceClient sits on the far side of the network and mirrors the
    handler set's three operations over HTTP.
"""

__version__ = "1.0.0"
