"""Infrastructure Layer — store adapters, notifiers, and cross-cutting concerns.

Invariants:
    - Infrastructure implements core Protocols; core never imports infrastructure
    - Store adapters map their own failures to core errors (DuplicateKeyError,
      StoreUnavailableError) before anything reaches the service

Design Decisions:
    - One module per adapter: SQL store, in-memory store, notifiers, dispatcher
"""
