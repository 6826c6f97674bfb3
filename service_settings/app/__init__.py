"""
Settings Service package for the Clinic Access Layer.

Owns the configurable appointment statuses of each clinic:

- app.main: API surface for listing, creating, editing, soft-deleting,
  restoring and reordering statuses.
- app.lifecycle: Status model, lifecycle transitions and display lookups.
- app.persistence: Versioned collection stores (in-memory, Redis).

Statuses are never hard-deleted.
"""
