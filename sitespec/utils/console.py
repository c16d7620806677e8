"""Shared Rich console setup."""

from rich.console import Console
from rich.theme import Theme

THEME = Theme(
    {
        'info': 'dim cyan',
        'warning': 'magenta',
        'danger': 'bold red',
        'success': 'bold green',
        'step': 'bold blue',
    }
)


def create_console(**kwargs) -> Console:
    """Create a Rich console with the sitespec theme."""
    return Console(theme=THEME, **kwargs)
