"""User-facing notification texts."""

ENABLED = "Custom context menu enabled. Restart VS Code to see the changes."
DISABLED = "Custom context menu disabled and reverted to default. Restart VS Code to see the changes."
RESTART_IDE = "Restart"
ADMIN = "Run VS Code with admin privileges so the workbench file can be modified."
SOMETHING_WRONG = "Something went wrong: "
UNABLE_TO_LOCATE = "Unable to locate the installation path of VS Code. Set custom-contextmenu.vscodeInstallPath."
BACKUP_NOT_FOUND = (
    "The workbench file is patched but its backup is missing. "
    "Reinstall VS Code to restore the original workbench file."
)
NOTHING_TO_REMOVE = "Nothing to remove: no VS Code workbench file was found."
STALE_BACKUPS_REMAIN = "The workbench file was restored, but stale backups remain: "
