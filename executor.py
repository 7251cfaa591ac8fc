import logging
import subprocess
from datetime import datetime, timezone

logger = logging.getLogger(__name__)


def run_command(command: str, timeout: int | None = None) -> dict:
    """Run command through the shell with stderr merged into stdout.

    `at` reports a new job on stderr and lists jobs on stdout, so both
    streams are read as one.
    """
    start_time = datetime.now(timezone.utc)
    result = {
        "exit_code": None,
        "output": [],
        "start_at": start_time.isoformat(),
        "end_at": None,
        "duration_seconds": None
    }
    logger.debug("exec: %s", command)

    try:
        process = subprocess.run(
            command,
            shell=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            timeout=timeout
        )
        result["exit_code"] = process.returncode
        result["output"] = process.stdout.splitlines()

    except subprocess.TimeoutExpired:
        logger.warning("Command timed out after %s seconds: %s", timeout, command)
        result["exit_code"] = -1

    end_time = datetime.now(timezone.utc)
    result["end_at"] = end_time.isoformat()
    result["duration_seconds"] = (end_time - start_time).total_seconds()
    logger.debug("exit=%s lines=%d", result["exit_code"], len(result["output"]))

    return result
