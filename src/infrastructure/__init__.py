"""Infrastructure layer - Adapters and external integrations.

This layer contains implementations of domain protocols (ports):
- Database repositories
- Credential hashing, token signing and digests
- Delivery (email, SMS) and social identity verification

Structure:
- persistence/: SQLAlchemy models and PostgreSQL repositories
- security/: bcrypt, JWT, token digests, one-time secrets
- email/, sms/: Message delivery
- social/: Google, Apple and Facebook token verification
- time/: Timezone-aware clock for rate-limit windows
- jobs/: Credential sweeps and their scheduler
- logging/: structlog adapter

The infrastructure layer depends on the domain layer (implements protocols)
but the domain layer does NOT depend on infrastructure.
"""
