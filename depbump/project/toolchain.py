"""
Node toolchain selection via nvm.

A project pins its Node version in .nvmrc. Without a pin the configured
default is used, and failing to switch to the default is only a warning.
Failing to switch to an explicit pin fails the project.
"""

import logging
import os
import shlex
from dataclasses import dataclass
from pathlib import Path

from depbump.git.runner import run_command, CommandResult
from depbump.lib.config import UpdateSettings
from depbump.lib.constants import VERSION_PIN_FILE
from depbump.lib.errors import ExternalToolFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Toolchain:
    """The Node version a project is built with."""
    version: str
    pinned: bool  # True if the version came from the project's pin file
    bin_dir: Path | None = None  # None means "whatever node is on PATH"

    @property
    def major(self) -> str:
        return major_version(self.version)

    def env(self) -> dict[str, str]:
        """Environment overrides that put this toolchain first on PATH."""
        if self.bin_dir is None:
            return {}
        return {"PATH": f"{self.bin_dir}{os.pathsep}{os.environ.get('PATH', '')}"}


def major_version(version: str) -> str:
    """'v16.14.0' -> '16'. Aliases like 'lts/gallium' pass through."""
    return version.lstrip("v").split(".")[0]


def read_version_pin(project_path: Path) -> str | None:
    """Read the pinned Node version, or None if the pin file is missing or empty."""
    pin_file = project_path / VERSION_PIN_FILE
    try:
        content = pin_file.read_text().strip()
    except OSError:
        return None
    return content or None


def get_nvm_dir(settings: UpdateSettings) -> Path:
    if settings.nvm_dir:
        return Path(settings.nvm_dir).expanduser()
    env_dir = os.environ.get("NVM_DIR")
    if env_dir:
        return Path(env_dir)
    return Path.home() / ".nvm"


def locate_node(version: str, nvm_dir: Path) -> CommandResult:
    """Ask nvm for the node binary of an installed version."""
    script = f'. "{nvm_dir}/nvm.sh" && nvm which {shlex.quote(version)}'
    return run_command(["bash", "-c", script], env={"NVM_DIR": str(nvm_dir)})


def resolve_toolchain(project_path: Path, settings: UpdateSettings) -> Toolchain:
    """
    Pick and locate the Node toolchain for a project.

    Raises:
        ExternalToolFailure: If the project pins a version nvm can't provide
    """
    pin = read_version_pin(project_path)
    if pin is None:
        logger.info(
            f"{project_path.name}: no {VERSION_PIN_FILE}, using default Node {settings.default_node_version}"
        )
        version, pinned = settings.default_node_version, False
    else:
        version, pinned = pin, True

    result = locate_node(major_version(version), get_nvm_dir(settings))
    node_path = result.stdout.strip().splitlines()[-1] if result.stdout.strip() else ""
    if not result.success or not node_path:
        if pinned:
            raise ExternalToolFailure(
                "nvm",
                f"cannot switch to Node {version} pinned in {VERSION_PIN_FILE}",
                returncode=result.returncode,
                output=result.output,
            )
        logger.warning(
            f"{project_path.name}: default Node {version} unavailable via nvm "
            f"({result.output or 'no output'}), using node from PATH"
        )
        return Toolchain(version=version, pinned=False)

    return Toolchain(version=version, pinned=pinned, bin_dir=Path(node_path).parent)
