"""Service layer: evaluation, guarding and rule tables.

Services may import from domain, config models and plugins.
They must never import from commands or output.
"""
