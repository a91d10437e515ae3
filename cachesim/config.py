from __future__ import annotations
from dataclasses import dataclass, fields
import logging
import yaml
from pathlib import Path

from .core.geometry import Geometry, AssociativityMode
from .core.policy import ReplacementPolicy
from .errors import ConfigurationError
from .utils.logging import get_logger

logger = get_logger(__name__)

# Set-associative choices: 1 -> 2 lines per set ... 4 -> 16 lines per set
VALID_WAYS = (1, 2, 3, 4)


@dataclass
class SimConfig:
    """Cache simulator configuration.

    Values come from the defaults below, then a YAML file, then CLI flags.
    Nothing is validated until geometry() or policy() is called.
    """
    # Input trace
    trace: str = ""

    # Config file
    config_file: str = ""

    # Cache geometry (sizes are powers of two, in bytes)
    cache_size_exp: int = 10
    line_size_exp: int = 6
    cache_type: str = "dm"  # fa, dm, sa
    ways: int | None = None  # only for sa

    # "l"/"L" for LRU, anything else for FIFO
    replacement_policy: str = "l"

    # Reporting
    report_dir: str = "out/default_run"
    chart: bool = True
    ascii_chart: bool = False
    log_level: str = "INFO"

    def geometry(self) -> Geometry:
        """Builds the validated cache geometry for this config."""
        try:
            mode = AssociativityMode(str(self.cache_type).strip().lower())
        except ValueError:
            raise ConfigurationError(f"{self.cache_type!r} is not fa, dm, or sa!") from None

        ways_exp = None
        if mode is AssociativityMode.SET_ASSOCIATIVE:
            if self.ways not in VALID_WAYS:
                raise ConfigurationError(f"{self.ways!r} is not 1, 2, 3, or 4!")
            ways_exp = int(self.ways)

        return Geometry(self.cache_size_exp, self.line_size_exp, mode, ways_exp)

    def policy(self) -> ReplacementPolicy:
        """Spelled-out "lru"/"fifo" name the policy directly; otherwise only "l" selects LRU."""
        name = str(self.replacement_policy).strip().lower()
        if name in (p.value for p in ReplacementPolicy):
            return ReplacementPolicy(name)
        return ReplacementPolicy.from_selector(name)

    @classmethod
    def field_names(cls) -> set:
        return {f.name for f in fields(cls)}

    def validate(self):
        """Checks every field that affects a run, raising ConfigurationError."""
        self.geometry()
        if not isinstance(logging.getLevelName(str(self.log_level).upper()), int):
            raise ConfigurationError(f"Unknown log level: {self.log_level!r}")

    def update_from_yaml(self, yaml_path: str):
        """Updates config fields from a YAML file."""
        with open(yaml_path, 'r') as f:
            yaml_config = yaml.safe_load(f) or {}
        if not isinstance(yaml_config, dict):
            raise ConfigurationError(f"Config file {yaml_path} must contain a mapping.")
        known = self.field_names()
        for key, value in yaml_config.items():
            if key in known:
                setattr(self, key, value)
            else:
                logger.warning(f"Ignoring unknown config key '{key}' in {yaml_path}")

    @classmethod
    def from_args(cls, args) -> SimConfig:
        """Factory method to create a SimConfig from parsed argparse arguments."""
        config = cls()

        # 1. Load from YAML config file if provided
        if hasattr(args, 'config') and args.config:
            config.config_file = args.config
            if Path(config.config_file).exists():
                config.update_from_yaml(config.config_file)
            else:
                logger.warning(f"Config file {config.config_file} not found.")

        # 2. Override with command-line arguments
        known = cls.field_names()
        arg_dict = vars(args)
        for key, value in arg_dict.items():
            if value is not None and key in known:
                setattr(config, key, value)

        return config
