"""HTTP API: routes, dependencies, models and middleware."""
