"""Application layer - Use cases and orchestration.

This layer contains the application's use cases following the CQRS pattern:
- Commands: Write operations that change state
- Queries: Read operations that fetch data

Structure:
- commands/: Command dataclasses and handlers (write operations)
- queries/: Query dataclasses and handlers (read operations)
- services/: OTP engine and session store shared by several handlers
- dtos/: Results handed back to the presentation layer

The application layer orchestrates domain logic but contains no business rules.
"""
