"""Install and remove a custom context menu script in the VS Code workbench."""

__version__ = "0.4.0"
