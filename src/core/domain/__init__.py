"""Domain models and errors.

Why a separate package:
- Pure data structures (Pydantic v2) and exceptions; the domain knows
  nothing about HTTP, the CLI or rendering.
"""
