import argparse, logging
from typing import Callable, Tuple, Optional
from common.config import load_config, Config
from exceptions.exceptions import GeometryError

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

# process exit codes shared by the entry points
EXIT_OK = 0
EXIT_GEOMETRY = 1
EXIT_MISSING_INPUT = 2


def add_config_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", help="Path to YAML config file (sections: downsample, plane, volume, ...)")

def add_log_level_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, help="Logging level")

def parse_args_with_config(build_parser: Callable[[], argparse.ArgumentParser],
                           defaults_from_cfg: Callable[[Config], dict],
                           argv: Optional[list] = None) -> Tuple[argparse.Namespace, Config]:
    """
    Two-pass parse so a YAML file can supply defaults:
    1. parse_known_args only to find --config
    2. load the config and install defaults_from_cfg(cfg) as parser defaults
    3. parse for real; explicit flags beat config values
    """
    p = build_parser()
    cfg_path = p.parse_known_args(argv)[0].config
    cfg = load_config(cfg_path)
    p.set_defaults(**defaults_from_cfg(cfg))
    args = p.parse_args(argv)
    return args, cfg

def setup_logging(log_level: Optional[str]) -> None:
    level = getattr(logging, (log_level or "INFO").upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # basicConfig is a no-op once handlers exist; keep the level in sync anyway
    logging.getLogger().setLevel(level)

def exit_code_for(exc: BaseException) -> int:
    """Map an error escaping a pipeline run to the process exit code, logging it."""
    if isinstance(exc, FileNotFoundError):
        logging.error("Input not found: %s", exc)
        return EXIT_MISSING_INPUT
    if isinstance(exc, GeometryError):
        logging.error("%s (%s): %s", exc.code, exc.context or "-", exc)
        return EXIT_GEOMETRY
    raise exc
