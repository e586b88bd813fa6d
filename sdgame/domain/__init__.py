"""
Domain Layer

Models, configuration and the pure evaluation engine.
"""
