"""Infrastructure layer: shared database connection and external providers.

- **database**: connection manager, declarative models and collection operations
- **payments**: Stripe REST adapter for recurring prices and checkout sessions
"""
