"""Interactive grep for streaming text: query matching, line sources, key bindings and the sig command."""

__version__ = "0.1.4"