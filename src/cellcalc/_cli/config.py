"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import cast


class ConfigError(Exception):
    """Error in cellcalc configuration."""


@dataclass(slots=True, frozen=True)
class CellcalcConfig:
    """Configuration loaded from the ``[tool.cellcalc]`` section.

    Attributes:
        variables: Initial numeric variables for the table.
        project_root: Directory containing the pyproject.toml, if one was found.

    """

    variables: dict[str, float] = field(default_factory=dict)
    project_root: Path | None = None


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        candidate = current / "pyproject.toml"
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            # Reached filesystem root
            return None
        current = parent


def _parse_variables(value: object) -> dict[str, float]:
    """Parse the ``variables`` table into name -> float.

    Raises:
        ConfigError: If the value is not a table of numbers.

    """
    if not isinstance(value, dict):
        msg = "Invalid [tool.cellcalc].variables: expected a table of numbers"
        raise ConfigError(msg)

    variables: dict[str, float] = {}
    for name, number in cast("dict[str, object]", value).items():
        # bool is an int subclass
        if isinstance(number, bool) or not isinstance(number, (int, float)):
            msg = f"Invalid [tool.cellcalc].variables.{name}: expected a number"
            raise ConfigError(msg)
        variables[name] = float(number)
    return variables


def load_config(pyproject_path: Path) -> CellcalcConfig:
    """Load and validate [tool.cellcalc] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed CellcalcConfig

    Raises:
        ConfigError: If the configuration is invalid

    """
    project_root = pyproject_path.parent

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    section = data.get("tool", {}).get("cellcalc", {})
    if not section:
        return CellcalcConfig(project_root=project_root)

    variables: dict[str, float] = {}
    if "variables" in section:
        variables = _parse_variables(section["variables"])

    return CellcalcConfig(variables=variables, project_root=project_root)


def get_config() -> CellcalcConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        CellcalcConfig (may be empty if no pyproject.toml or no [tool.cellcalc] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return CellcalcConfig()
    return load_config(pyproject_path)
