"""KEY=VALUE environment file merging"""

import logging
import os
import re
from pathlib import Path
from typing import Dict, List, Mapping, Tuple

logger = logging.getLogger(__name__)

# Only upper-case keys are managed; anything else is preserved verbatim
ENV_LINE_PATTERN = re.compile(r"^([A-Z_]+)=(.*)$")


def parse_env_content(content: str) -> Tuple[List[str], Dict[str, str]]:
    """Split env file content into preserved lines and managed variables

    Returns:
        Tuple of (other non-blank lines, variables in file order)
    """
    other_lines: List[str] = []
    variables: Dict[str, str] = {}

    for line in content.split("\n"):
        match = ENV_LINE_PATTERN.match(line)
        if match:
            variables[match.group(1)] = match.group(2)
        elif line.strip():
            other_lines.append(line)

    return other_lines, variables


def render_env_content(other_lines: List[str], variables: Mapping[str, str]) -> str:
    """Build env file content: preserved lines, a blank separator, then non-empty variables"""
    lines = list(other_lines)
    if other_lines and variables:
        lines.append("")

    lines.extend(f"{key}={value}" for key, value in variables.items() if value)
    return "\n".join(lines) + "\n"


def atomic_write_text(path: Path, content: str) -> None:
    """Write to <path>.tmp and rename over the target"""
    path = Path(path)
    tmp_path = path.with_name(path.name + ".tmp")
    tmp_path.write_text(content, encoding="utf-8")
    os.replace(tmp_path, path)


def update_env_file(env_file: Path, updates: Mapping[str, str]) -> None:
    """Merge variables into an env file

    Existing unmanaged lines are kept, keys in updates are overwritten, and
    keys whose merged value is empty are dropped.

    Raises:
        OSError: If the file cannot be read or written
    """
    env_file = Path(env_file)
    content = env_file.read_text(encoding="utf-8") if env_file.exists() else ""

    other_lines, variables = parse_env_content(content)
    if other_lines:
        logger.debug(f"Preserving {len(other_lines)} unmanaged line(s) in {env_file}")

    variables.update(updates)
    atomic_write_text(env_file, render_env_content(other_lines, variables))
    logger.debug(f"Updated {env_file}")
