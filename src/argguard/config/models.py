"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, argguard.toml only contains
overrides. An empty (or missing) file is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel

# --- argguard.toml sections ---


class ConstraintConfig(BaseModel):
    """[constraints] section.

    Attributes:
        message_separator: Joins the messages of a rule whose constraints
            fire together. Empty keeps them back to back.
        whitespace_is_blank: Treat whitespace-only strings as blank.
    """

    model_config = {"frozen": True}

    message_separator: str = ""
    whitespace_is_blank: bool = False


class GuardConfig(BaseModel):
    """[guard] section."""

    model_config = {"frozen": True}

    log_arguments: bool = True
    log_results: bool = True
