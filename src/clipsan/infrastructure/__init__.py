"""Infrastructure layer — filesystem and binary payload inspection.

This layer depends only on stdlib.
It must never import from domain, services, commands, or output.
The service layer bridges between domain models and infrastructure.
"""
