"""Shared CLI context with lazy-initialized dependencies."""

from busical import setup_calendar_service, setup_storage
from busical.config import BusiCalConfig
from busical.ingestion.service import CalendarService
from busical.storage.email_history import EmailHistory
from busical.storage.key_value import KeyValueStore


class CLIContext:
    """Shared context with lazy-initialized dependencies for CLI commands.

    Usage:
        ctx = CLIContext()
        record = ctx.service.cached()
    """

    def __init__(self, verbose: bool = False, quiet: bool = False):
        """Initialize CLI context.

        Args:
            verbose: If True, enable info logging on the console
            quiet: If True, suppress non-error output
        """
        self.verbose = verbose
        self.quiet = quiet

        # Lazy-loaded dependencies
        self._config: BusiCalConfig | None = None
        self._storage: KeyValueStore | None = None
        self._service: CalendarService | None = None
        self._email_history: EmailHistory | None = None

    @property
    def config(self) -> BusiCalConfig:
        """Get configuration (lazy-loaded)."""
        if self._config is None:
            self._config = BusiCalConfig.from_env()
        return self._config

    @property
    def storage(self) -> KeyValueStore:
        """Get key-value storage (lazy-loaded)."""
        if self._storage is None:
            self._storage = setup_storage(self.config)
        return self._storage

    @property
    def service(self) -> CalendarService:
        """Get calendar service (lazy-loaded).

        Raises:
            CryptoUnsupportedError: If URL encryption is unavailable
        """
        if self._service is None:
            self._service = setup_calendar_service(self.config, self.storage)
        return self._service

    @property
    def email_history(self) -> EmailHistory:
        """Get e-mail history (lazy-loaded)."""
        if self._email_history is None:
            self._email_history = EmailHistory(
                self.storage, self.config.email_history_limit
            )
        return self._email_history


# Global context instance (set by Typer callback)
_ctx: CLIContext | None = None


def get_context() -> CLIContext:
    """Get the current CLI context.

    Raises:
        RuntimeError: If context not initialized
    """
    if _ctx is None:
        raise RuntimeError("CLI context not initialized. This should not happen.")
    return _ctx


def set_context(ctx: CLIContext) -> None:
    """Set the global CLI context."""
    global _ctx
    _ctx = ctx
