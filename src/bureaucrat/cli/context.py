"""CLI context management for database connections and shared state."""

import os
from dataclasses import dataclass, field

from bureaucrat import DataDomain

DEFAULT_META_URL = "sqlite:///./bureaucrat_meta.db"
DEFAULT_DOMAIN_URL = "sqlite:///./bureaucrat.db"


def get_meta_url(url: str | None) -> str:
    """Resolve metadata store URL from CLI arg, environment variable, or default.

    Priority:
    1. Explicit URL argument
    2. BUREAUCRAT_META_URL environment variable
    3. Default: sqlite:///./bureaucrat_meta.db
    """
    if url:
        return url
    if env_url := os.getenv("BUREAUCRAT_META_URL"):
        return env_url
    return DEFAULT_META_URL


def get_domain_url(url: str | None) -> str:
    """Resolve domain store URL from CLI arg, environment variable, or default.

    Priority:
    1. Explicit URL argument
    2. BUREAUCRAT_DOMAIN_URL environment variable
    3. Default: sqlite:///./bureaucrat.db
    """
    if url:
        return url
    if env_url := os.getenv("BUREAUCRAT_DOMAIN_URL"):
        return env_url
    return DEFAULT_DOMAIN_URL


@dataclass
class CLIContext:
    """Shared context for CLI commands.

    Manages the data domain lifecycle and output preferences.
    """

    meta_url: str
    domain_url: str
    echo: bool
    json_output: bool
    _domain: DataDomain | None = field(default=None, init=False, repr=False)

    def get_domain(self) -> DataDomain:
        """Get or create the data domain (lazy initialization).

        Returns:
            DataDomain instance
        """
        if self._domain is None:
            self._domain = DataDomain(self.meta_url, self.domain_url, echo=self.echo)
        return self._domain

    def close(self) -> None:
        """Close database connections if open."""
        if self._domain is not None:
            self._domain.close()
            self._domain = None
