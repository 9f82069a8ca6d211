"""
Stage Runner
============

Run one external toolchain command with an optional time budget and report
how it ended as a StageOutcome. Timeouts and launch failures are returned,
not raised, so the pipeline decides what each one means for its stage.
"""

from typing import List, Optional, Sequence, Union
from pathlib import Path
import shlex
import subprocess

from latex_renderer.config.logging import get_logger
from latex_renderer.models.schemas import StageOutcome, StageStatus

logger = get_logger(__name__)

PATH_PLACEHOLDER = "{path}"


def render_command(template: str, path: Union[str, Path]) -> List[str]:
    """
    Expand a command template into an argument list.

    The template is tokenized before the placeholder is substituted, so
    workspace paths never need shell quoting.

    Args:
        template: Command line with "{path}" placeholders
        path: Workspace base path

    Returns:
        Argument list ready for subprocess
    """
    return [token.replace(PATH_PLACEHOLDER, str(path)) for token in shlex.split(template)]


def run_stage(
    command: Sequence[str],
    timeout: Optional[float] = None,
    merge_stderr: bool = True,
    cwd: Optional[Path] = None,
) -> StageOutcome:
    """
    Run a toolchain command to completion.

    Args:
        command: Argument list
        timeout: Seconds before the process is killed, None for no bound
        merge_stderr: Capture stderr into the same stream as stdout
        cwd: Working directory for the process

    Returns:
        StageOutcome; the exit code alone never decides success
    """
    args = [str(arg) for arg in command]
    log = logger.bind(command=args[0] if args else "")

    try:
        process = subprocess.run(
            args,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT if merge_stderr else subprocess.PIPE,
            timeout=timeout,
            cwd=str(cwd) if cwd is not None else None,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        log.warning("Stage timed out", timeout=timeout)
        return StageOutcome(
            command=args,
            status=StageStatus.TIMED_OUT,
            output=_decode(e.stdout),
            error=f"The process exceeded the timeout of {timeout} seconds.",
        )
    except OSError as e:
        log.warning("Stage could not be started", error=str(e))
        return StageOutcome(
            command=args,
            status=StageStatus.LAUNCH_FAILED,
            error=str(e),
        )

    output = _decode(process.stdout)
    if not merge_stderr and process.stderr:
        error_output = _decode(process.stderr)
    else:
        error_output = None

    # Killed by a signal before writing anything
    if process.returncode < 0 and not process.stdout:
        log.warning("Stage crashed", signal=-process.returncode)
        return StageOutcome(
            command=args,
            status=StageStatus.LAUNCH_FAILED,
            exit_code=process.returncode,
            error=f"The process was terminated by signal {-process.returncode}.",
        )

    log.debug("Stage completed", exit_code=process.returncode, output_length=len(output))
    return StageOutcome(
        command=args,
        status=StageStatus.COMPLETED,
        exit_code=process.returncode,
        output=output,
        error=error_output,
        raw_output=process.stdout or b"",
    )


def _decode(data: Optional[bytes]) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")
