"""
Cortex Relay Server Package.

This package contains the web server that connects browser extensions to the
goal planner and the task sequencer.

Subpackages:
    api: FastAPI route definitions (health, websocket relay, task views).
    core: Settings and project constants.
    exception_handlers: Global error handling for REST routes.
    schemas: Pydantic response models for the REST API.
    services: Per-connection sessions, page analysis and runtime wiring.
"""
