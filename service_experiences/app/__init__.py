"""
Experience Access engine application package.

- app.main: Process-start bootstrap (create_engine).
- app.experiences: Experience model, registry and role classifier.
- app.matching: Route pattern and permission matchers.
- app.authorization: Authorization facade and session overrides.
- app.guards: FastAPI dependencies consuming the facade.
"""
