"""
Sprint Coach - a sprint-training log with an AI readiness coach.

This package contains the complete application:
- core: Framework-agnostic business logic
- infrastructure: External service integrations
- api: FastAPI routes and dependencies
- client: Local session store, HTTP client, renderer and CLI
- config: Application configuration
"""

__version__ = "0.1.0"
