"""Shell integration: changing the caller's directory or spawning a subshell."""

from __future__ import annotations

import os
import subprocess
import sys
import tempfile
from pathlib import Path

CD_FILE_ENV = "REPOTREE_CD_FILE"


def output_cd(path: Path, env_var: str = CD_FILE_ENV) -> bool:
    """Write path to the CD file for the shell wrapper to pick up.

    Returns True if the wrapper is active and the path was written.
    """
    cd_file = os.environ.get(env_var)
    if not cd_file:
        return False
    # Validate cd_file is in temp directory to prevent path traversal
    try:
        cd_path = Path(cd_file).resolve()
        temp_dir = Path(tempfile.gettempdir()).resolve()
        cd_path.relative_to(temp_dir)
        cd_path.write_text(str(path))
    except (ValueError, OSError):
        return False
    return True


def open_shell(path: Path) -> int:
    """Run an interactive shell inside path and return its exit status."""
    if sys.platform == "win32":
        shell = os.environ.get("COMSPEC", "cmd.exe")
    else:
        shell = os.environ.get("SHELL") or "/bin/sh"
    result = subprocess.run([shell], cwd=path, check=False)
    return result.returncode


SHELL_WRAPPER_TEMPLATE_ZSH = """
# {tool_name} shell integration
export {env_var}="${{TMPDIR:-/tmp}}/.{tool_name}_cd_$$"

{tool_name}() {{
    rm -f "${env_var}"
    command {tool_name} "$@"
    local exit_code=$?

    if [[ -f "${env_var}" ]]; then
        cd "$(cat "${env_var}")"
        rm -f "${env_var}"
    fi

    return $exit_code
}}
"""

SHELL_WRAPPER_TEMPLATE_BASH = """
# {tool_name} shell integration
export {env_var}="${{TMPDIR:-/tmp}}/.{tool_name}_cd_$$"

{tool_name}() {{
    rm -f "${env_var}"
    command {tool_name} "$@"
    local exit_code=$?

    if [ -f "${env_var}" ]; then
        cd "$(cat "${env_var}")"
        rm -f "${env_var}"
    fi

    return $exit_code
}}
"""


def get_shell_wrapper(tool_name: str = "rt", shell: str = "zsh") -> str:
    """Generate shell wrapper script for a tool.

    Args:
        tool_name: Name of the executable to wrap
        shell: Shell type ('zsh' or 'bash')
    """
    template = (
        SHELL_WRAPPER_TEMPLATE_ZSH if shell == "zsh" else SHELL_WRAPPER_TEMPLATE_BASH
    )
    return template.format(tool_name=tool_name, env_var=CD_FILE_ENV)

