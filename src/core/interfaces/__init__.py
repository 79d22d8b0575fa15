"""Core interfaces and abstractions.

Why interfaces:
- Adapters and UI layers implement contracts (Protocol), so the services
  depend on abstractions only.
"""
