"""Domain layer: rule descriptors, verdicts and the checks they drive.

This layer depends only on stdlib and pydantic.
It must never import from services, commands, output, or config.
It never logs; callers decide how outcomes are reported.
"""
