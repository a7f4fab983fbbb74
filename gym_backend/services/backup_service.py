"""
Backup trigger - token-gated run of the external backup script

Failures never raise: they come back as BackupResponse(success=False, ...)
so callers can branch on the body alone.
"""
import hmac
import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol, Sequence

from gym_backend.config import settings
from gym_backend.models.schemas import BackupResponse

logger = logging.getLogger("gym_backend.audit")

MAX_OUTPUT_CHARS = 2000
POWERSHELL = ["powershell", "-ExecutionPolicy", "Bypass", "-File"]


@dataclass(frozen=True)
class CommandResult:
    exit_code: int
    output: str


class CommandRunner(Protocol):
    def run(self, args: Sequence[str], timeout: Optional[float]) -> CommandResult:
        ...


class SubprocessRunner:
    """Runs a command, stderr merged into stdout, and waits for it to exit"""

    def run(self, args: Sequence[str], timeout: Optional[float]) -> CommandResult:
        # communicate() drains the pipe before the exit code is read
        completed = subprocess.run(
            list(args),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            stdin=subprocess.DEVNULL,
            timeout=timeout,
            encoding="utf-8",
            errors="replace",
        )
        return CommandResult(exit_code=completed.returncode, output=completed.stdout or "")


def trim_output(output: Optional[str]) -> str:
    """Keep the trailing MAX_OUTPUT_CHARS characters, stripped"""
    if not output:
        return ""
    return output[-MAX_OUTPUT_CHARS:].strip()


class BackupService:
    """Validates the shared-secret token and runs the backup script"""

    def __init__(
        self,
        token: str,
        script_path: str,
        interpreter: str = "",
        timeout: Optional[float] = None,
        runner: Optional[CommandRunner] = None,
        cwd: Optional[str] = None,
    ):
        self.token = token or ""
        self.script_path = script_path
        self.interpreter = interpreter or ""
        self.timeout = timeout
        self.runner = runner or SubprocessRunner()
        self.cwd = cwd

    @classmethod
    def from_settings(cls, runner: Optional[CommandRunner] = None) -> "BackupService":
        return cls(
            token=settings.BACKUP_TOKEN,
            script_path=settings.BACKUP_SCRIPT_PATH,
            interpreter=settings.BACKUP_INTERPRETER,
            timeout=settings.BACKUP_TIMEOUT_SECONDS,
            runner=runner,
        )

    def resolve_script(self) -> Path:
        path = Path(self.script_path)
        if not path.is_absolute():
            path = Path(self.cwd or os.getcwd()) / path
        return path

    def build_command(self, script: Path) -> List[str]:
        if self.interpreter.strip():
            return shlex.split(self.interpreter) + [str(script)]
        if script.suffix.lower() == ".ps1":
            return POWERSHELL + [str(script)]
        return [str(script)]

    def _audit(self, success: bool, **fields) -> None:
        logger.info({"event": "BACKUP", "entity": "backup", "success": success, **fields})

    def run(self, provided_token: Optional[str]) -> BackupResponse:
        # An unset token disables the endpoint, it never means "no gate"
        if not self.token.strip():
            self._audit(False, reason="token_not_configured")
            return BackupResponse(success=False, exit_code=-1, output="Token de respaldo no configurado.")

        if provided_token is None or not hmac.compare_digest(
            self.token.encode("utf-8"), provided_token.encode("utf-8")
        ):
            self._audit(False, reason="invalid_token")
            return BackupResponse(success=False, exit_code=-1, output="Token de respaldo invalido.")

        script = self.resolve_script()
        if not script.is_file():
            self._audit(False, reason="script_not_found")
            return BackupResponse(success=False, exit_code=-1, output="No se encontro el script de respaldo.")

        try:
            result = self.runner.run(self.build_command(script), self.timeout)
        except subprocess.TimeoutExpired:
            self._audit(False, reason="timeout")
            return BackupResponse(success=False, exit_code=-1, output="El respaldo excedio el tiempo limite.")
        except Exception:
            logger.exception("Backup script could not be executed")
            self._audit(False, reason="exception")
            return BackupResponse(success=False, exit_code=-1, output="No se pudo ejecutar el respaldo.")

        output = trim_output(result.output)
        if result.exit_code != 0:
            self._audit(False, exit_code=result.exit_code)
            return BackupResponse(success=False, exit_code=result.exit_code, output=output or "Respaldo fallo.")

        self._audit(True, exit_code=result.exit_code)
        return BackupResponse(success=True, exit_code=result.exit_code, output=output)
