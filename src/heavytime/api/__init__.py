"""Heavytime Stories — FastAPI REST API layer.

This package contains the FastAPI application, Pydantic request models, and
the story gallery listing helpers.

Modules
-------
main
    FastAPI application with all route handlers and the ``main()`` CLI
    entry point.
models
    Pydantic models for API request validation.
story_gallery
    Story filtering and pagination helpers.
"""
