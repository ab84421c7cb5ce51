"""
Feature modules for the Identa backend.

Each module is self-contained with its own:
- interfaces.py: Protocol definitions for the module's public API
- models.py: Pydantic models for data transfer
- service.py: Business logic implementation
- exceptions.py: Module-specific exceptions

Routes live in api/routes and depend on the interfaces, not on the
concrete services.
"""
