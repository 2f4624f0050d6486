"""
Infrastructure Layer

Cross-cutting runtime services: metrics and rate limiting.
"""
