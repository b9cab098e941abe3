"""Services Layer — orchestration of core rules around store and notifier IO.

Invariants:
    - Services depend on core Protocols, never on a concrete store
    - No HTTP concepts (status codes, requests) below this layer

Design Decisions:
    - One service class for the waitlist lifecycle: every operation shares the same
      store, dispatcher, and capacity
"""
