"""
Application Layer

FastAPI app factory, HTTP routes and request validation.
"""
