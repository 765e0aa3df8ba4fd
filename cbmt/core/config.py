"""
Configuration for CBMT tooling.

Defines the default merge, input limits for the command line surface and
logging options. The core tree and proof code takes no configuration; it
only ever sees the Merge it is handed.

Precedence (lowest to highest): dataclass defaults, JSON config file,
CBMT_* environment variables (a .env file in the working directory is
loaded first).
"""

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from cbmt.core.merge import DEFAULT_MERGE, available_merges
from cbmt.utils.validation import MAX_LEAVES, MAX_POSITIONS


ENV_PREFIX = "CBMT_"


@dataclass
class CBMTConfig:
    """Tool-wide configuration parameters"""

    # Merge used when none is named explicitly
    merge: str = DEFAULT_MERGE

    # Input limits
    max_leaves: int = MAX_LEAVES  # Leaves accepted by one CLI invocation
    max_proof_positions: int = MAX_POSITIONS  # Positions per proof request

    # Logging
    log_level: str = "INFO"
    log_dir: Path = Path("logs")
    log_to_file: bool = False

    def __post_init__(self):
        """Normalize and validate values"""
        self.merge = self.merge.lower()
        if self.merge not in available_merges():
            raise ValueError(f"Unknown merge {self.merge!r}")

        self.max_leaves = int(self.max_leaves)
        self.max_proof_positions = int(self.max_proof_positions)
        if self.max_leaves < 1:
            raise ValueError("max_leaves must be >= 1")
        if self.max_proof_positions < 1:
            raise ValueError("max_proof_positions must be >= 1")

        self.log_level = self.log_level.upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Unknown log level {self.log_level!r}")

        self.log_dir = Path(self.log_dir)
        if isinstance(self.log_to_file, str):
            self.log_to_file = self.log_to_file.strip().lower() in ("1", "true", "yes", "on")

    @property
    def log_level_value(self) -> int:
        """Numeric logging level"""
        return logging.getLevelName(self.log_level)


def _from_env() -> Dict[str, Any]:
    """Collect CBMT_<FIELD> overrides from the environment"""
    overrides = {}
    for f in fields(CBMTConfig):
        value = os.getenv(ENV_PREFIX + f.name.upper())
        if value is not None:
            overrides[f.name] = value
    return overrides


def load_config(config_path: Optional[str] = None) -> CBMTConfig:
    """
    Load configuration from file and environment, on top of defaults.

    Args:
        config_path: Optional path to a JSON config file

    Returns:
        CBMTConfig instance

    Raises:
        ValueError: on unknown keys or invalid values
        FileNotFoundError: if config_path does not exist
    """
    load_dotenv()

    values: Dict[str, Any] = {}
    if config_path:
        data = json.loads(Path(config_path).read_text())
        if not isinstance(data, dict):
            raise ValueError("Config file must contain a JSON object")
        known = {f.name for f in fields(CBMTConfig)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        values.update(data)

    values.update(_from_env())
    return CBMTConfig(**values)
