"""
Experience Access engine.

Decides which experience (portal) an authenticated actor operates under
and whether a route or permission is authorized within it.

Guidelines:
- Tables are built once and never mutated; queries are pure.
- Fail closed: unknown roles get the default experience, unmatched paths
  and permissions are denied.
- Only session overrides hold mutable state, guarded per session.
"""
