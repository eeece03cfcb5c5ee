"""Sequence configuration, discovery and the patch engine into user commands."""

from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from . import messages as msg
from .config import Configuration, load_configuration
from .discovery import candidate_roots, locate
from .errors import BackupNotFound, PatchError, PathNotFound, WriteError
from .patching import PatchEngine
from .report import InstallReport, StatusReport, UninstallReport
from .restart import RestartResult, restart_host
from .template import render_payload

logger = logging.getLogger(__name__)

Report = Union[InstallReport, UninstallReport]


class Notifier:
    """
    Shows a message with optional actions and returns the chosen one.

    The default answers non-interactively: the restart action is chosen when
    ``auto_restart`` is set, otherwise the message is dismissed.
    """

    def __init__(self, auto_restart: bool = False) -> None:
        self.auto_restart = auto_restart
        self.shown: List[str] = []

    def notify(self, message: str, actions: Sequence[str] = ()) -> Optional[str]:
        self.shown.append(message)
        if self.auto_restart and msg.RESTART_IDE in actions:
            return msg.RESTART_IDE
        return None


def _new_session_id() -> str:
    return str(uuid.uuid4())


class Session:
    """
    Context threaded through every command.

    The workbench path is looked up again for every command, so a changed
    configuration or a newly installed layout is always picked up.
    """

    def __init__(
        self,
        *,
        settings_file: Optional[str] = None,
        install_path: Optional[str] = None,
        notifier: Optional[Notifier] = None,
        template_path: Optional[Path] = None,
        restart: Callable[[str], RestartResult] = restart_host,
        session_id_factory: Callable[[], str] = _new_session_id,
    ) -> None:
        self.settings_file = settings_file
        self.install_path = install_path
        self.notifier = notifier or Notifier()
        self.template_path = template_path
        self.restart = restart
        self.session_id_factory = session_id_factory

    def configuration(self) -> Configuration:
        return load_configuration(self.settings_file, install_path=self.install_path)

    def resolve_target(self, config: Configuration) -> Path:
        target = locate(candidate_roots(config))
        logger.debug("workbench file: %s", target)
        return target

    def _prompt(self, report: Report, message: str, config: Configuration) -> None:
        """Notify with a restart action; restart at most once per command."""
        report.notifications.append(message)
        choice = self.notifier.notify(message, (msg.RESTART_IDE,))
        if choice == msg.RESTART_IDE and report.restart is None:
            report.restart = self.restart(config.restart_command)

    def cmd_install(self) -> InstallReport:
        config = self.configuration()
        report = InstallReport()

        try:
            target = self.resolve_target(config)
        except PathNotFound as e:
            report.errors.append((e.path, str(e)))
            self._prompt(report, msg.UNABLE_TO_LOCATE, config)
            return report
        report.target = target

        session_id = self.session_id_factory()
        report.session_id = session_id
        logger.info("enable, session %s", session_id)

        try:
            payload = render_payload(config, self.template_path)
            result = PatchEngine(target).install(session_id, payload)
        except WriteError as e:
            report.errors.append((e.path, str(e)))
            self._prompt(report, msg.ADMIN, config)
            # Make sure the user does not believe the install went through.
            self._prompt(report, msg.DISABLED, config)
            return report
        except PatchError as e:
            report.errors.append((e.path, str(e)))
            self._prompt(report, msg.SOMETHING_WRONG + str(e), config)
            return report

        report.previous_session = result.previous_session
        report.backup = result.backup
        report.csp_removed = result.csp_removed
        self._prompt(report, msg.ENABLED, config)
        return report

    def cmd_uninstall(self) -> UninstallReport:
        return self._uninstall(prompt=True)

    def deactivate(self) -> UninstallReport:
        """Host deactivation hook: uninstall without prompting."""
        return self._uninstall(prompt=False)

    def _uninstall(self, *, prompt: bool) -> UninstallReport:
        config = self.configuration()
        report = UninstallReport()

        try:
            target = self.resolve_target(config)
        except PathNotFound:
            logger.info("workbench file not found, nothing to remove")
            report.nothing_to_remove = True
            return report
        report.target = target

        try:
            result = PatchEngine(target).uninstall()
        except BackupNotFound as e:
            report.errors.append((e.path, str(e)))
            message = msg.BACKUP_NOT_FOUND
        except WriteError as e:
            report.errors.append((e.path, str(e)))
            message = msg.ADMIN
        except PatchError as e:
            report.errors.append((e.path, str(e)))
            message = msg.SOMETHING_WRONG + str(e)
        else:
            report.session_id = result.session_id
            report.already_clean = result.already_clean
            report.purged = result.purged
            report.purge_error = result.purge_error
            message = msg.DISABLED

        if prompt:
            self._prompt(report, message, config)
        elif report.errors:
            report.notifications.append(message)
        if report.purge_error:
            # Shown by the report summary; the notifier gets it without actions.
            self.notifier.notify(msg.STALE_BACKUPS_REMAIN + report.purge_error)
        return report

    def status(self) -> StatusReport:
        config = self.configuration()
        report = StatusReport()
        try:
            target = self.resolve_target(config)
        except PathNotFound:
            return report
        report.target = target

        try:
            st = PatchEngine(target).status()
        except PatchError as e:
            report.error = str(e)
            return report

        report.patched = st.patched
        report.session_id = st.session_id
        report.has_session_backup = st.has_session_backup
        report.backups = st.backups
        return report
