"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure; randomness is confined to access_codes.generate_access_code

Design Decisions:
    - Functional core separated from imperative shell: the service orchestrates
      store/notifier IO around these rules
"""
