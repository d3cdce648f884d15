"""Core modules for docstruct.

Includes:
- Dependency injection container for managing providers
- Exception hierarchy
"""

from .container import Container, get_container, shutdown_container

__all__ = ["Container", "get_container", "shutdown_container"]
