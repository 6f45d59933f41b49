from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence

from git_introspect.domain.models import GitExecutionError, RunResult

logger = logging.getLogger(__name__)


class SubprocessRunner:
    """Runs a command with stderr folded into stdout, like ``2>&1``.

    A non-zero exit code is returned, not raised: several git queries
    signal "nothing here" that way.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self._timeout = timeout

    def run(self, argv: Sequence[str], cwd: str) -> RunResult:
        logger.debug("running %s in %s", " ".join(argv), cwd)
        try:
            result = subprocess.run(
                list(argv),
                cwd=cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self._timeout,
            )
        except FileNotFoundError as exc:
            raise GitExecutionError(f"Cannot execute {argv[0]!r}: {exc}") from exc
        except subprocess.TimeoutExpired as exc:
            raise GitExecutionError(
                f"{' '.join(argv[:3])}... timed out after {self._timeout}s"
            ) from exc
        except OSError as exc:
            raise GitExecutionError(f"{' '.join(argv[:3])}... failed: {exc}") from exc

        if result.returncode != 0:
            logger.debug("exit code %d from %s", result.returncode, argv[:3])
        return RunResult(lines=result.stdout.splitlines(), exit_code=result.returncode)
