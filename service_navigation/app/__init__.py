"""
Navigation Service package for the Clinic Access Layer.

Decides which dashboard navigation items a clinic member may see:

- app.main: API surface returning the filtered navigation tree.
- app.access: User/role/permission models, the access evaluator and
  section collapse state.
- app.catalog: The dashboard's default navigation sections.

Guidelines:
- Evaluation is pure; the permission lookup is injected per request.
- Collapse state is presentation only and never changes a decision.
"""
