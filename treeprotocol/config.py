"""Configuration system for treeprotocol.

This module defines how users tune the reference builders and the walker:
which construction checks a builder performs and how deep a walk may go.
"""

from dataclasses import dataclass
from typing import List, Optional

from .errors import ConfigurationError


@dataclass
class ValidationConfig:
    """Which construction checks the reference builders perform.

    Every check is on by default. Turning checks off is useful when a
    producer is known to be correct and the extra bookkeeping is unwanted.
    """

    check_cardinality: bool = True   # ONE/OPTIONAL accept at most one right node
    check_keys: bool = True          # KEYED relations reject duplicate key values
    check_finish_kind: bool = True   # finish(kind, node) must match node's kind
    check_initargs: bool = True      # schema-declared initargs are enforced

    @classmethod
    def strict(cls) -> 'ValidationConfig':
        """Create a config with every check enabled."""
        return cls()

    @classmethod
    def permissive(cls) -> 'ValidationConfig':
        """Create a config with every check disabled."""
        return cls(
            check_cardinality=False,
            check_keys=False,
            check_finish_kind=False,
            check_initargs=False,
        )

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        The checks are independent of each other, so every combination
        is valid.

        Returns:
            List of validation errors (empty if valid)
        """
        errors: List[str] = []
        return errors


@dataclass
class WalkConfig:
    """Configuration for walk().

    max_depth is an opt-in guard for untrusted introspectors. Depth 0 is
    the root; None means unlimited.
    """

    max_depth: Optional[int] = None

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        if self.max_depth is not None and self.max_depth < 0:
            errors.append("max_depth cannot be negative")
        return errors


def ensure_valid(config) -> None:
    """Raise ConfigurationError if config.validate() reports problems."""
    problems = config.validate()
    if problems:
        raise ConfigurationError(
            f"Invalid {type(config).__name__}: {'; '.join(problems)}"
        )
