"""
Core business logic for sprint coaching.

This module is framework-agnostic - it doesn't import FastAPI, httpx,
or the Anthropic SDK. This separation means we can test the coaching
logic in isolation and swap frameworks if needed.
"""
