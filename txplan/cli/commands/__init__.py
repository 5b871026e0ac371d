"""CLI command modules."""

from .plan import (
    cmd_plan,
)
