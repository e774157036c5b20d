"""Container configuration."""

import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional

__all__ = ["ContainerConfiguration"]

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ContainerConfiguration:
    """Options fixed at container construction.

    Attributes:
        enable_property_injection: When set, constructed instances have their
            empty, writable, annotated attributes filled by resolving the
            declared type. Defaults to ``False``.
    """

    enable_property_injection: bool = False

    @classmethod
    def from_env(
        cls, prefix: str = "WIREWORK_", environ: Optional[Mapping[str, str]] = None
    ) -> "ContainerConfiguration":
        """Build a configuration from environment variables.

        Each option is read from ``<prefix><OPTION_NAME>``, e.g.
        ``WIREWORK_ENABLE_PROPERTY_INJECTION=true``. Options that are not set
        keep their defaults; unrecognised variables are ignored.

        Args:
            prefix: Prefix shared by the variables to read.
            environ: Mapping to read instead of :data:`os.environ`.

        Returns:
            The resulting configuration.
        """
        environ = os.environ if environ is None else environ
        values = {}
        for option in fields(cls):
            raw = environ.get(prefix + option.name.upper())
            if raw is not None:
                values[option.name] = raw.strip().lower() in _TRUTHY
        return cls(**values)
