"""
Access evaluation package.

- models: Role, Permission, User and navigation declarations.
- permissions: Clinic membership providing ``has_permission``.
- evaluator: First-match access rules and section filtering.
- collapse: Collapse preferences and auto-expansion of the active section.
"""
