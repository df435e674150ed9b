"""
Features module - domain-driven organization.

Each feature contains:
- schemas.py: Pydantic or dataclass models
- service or engine modules: business logic
"""
