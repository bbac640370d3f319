"""Domain layer - Pure business logic.

This layer contains the core business entities, value objects, protocols
(ports) and validators. The domain layer has NO dependencies on any
framework or infrastructure - it is pure Python.

Structure:
- entities/: Domain entities (mutable, have identity)
- value_objects/: Value objects (immutable, no identity)
- protocols/: Domain protocols (repository interfaces, service interfaces)
- validators/: Contact and password validation
- types.py: Annotated request field types

The domain layer defines WHAT the business does, not HOW it's implemented.
"""
