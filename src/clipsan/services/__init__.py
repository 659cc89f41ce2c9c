"""Service layer — pipeline, burst detection, paste store, and dispatch.

Services may import from domain and infrastructure layers.
They must never import from commands or output.
"""
