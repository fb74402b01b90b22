"""
Infrastructure layer - external service integrations.

Each subdirectory wraps an external dependency:
- anthropic: Claude API client
- storage: Local key-value storage (JSON file)

These wrappers translate between external formats and our domain models.
"""
