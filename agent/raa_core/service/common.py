"""
subprocess helper shared by the per-OS service shims.
"""

import subprocess

from ..errors import ServiceError


def run_command(cmd, check=True, timeout=15):
    """Run a service manager command. Raises ServiceError if it cannot run or (with check) fails."""
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except (OSError, subprocess.TimeoutExpired) as e:
        raise ServiceError(f"Failed to execute {cmd[0]}: {e}") from e

    if check and result.returncode != 0:
        detail = (result.stderr or result.stdout or "").strip()
        raise ServiceError(f"{' '.join(cmd[:2])} failed ({result.returncode}): {detail[:200]}")
    return result
