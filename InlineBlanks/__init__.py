import logging.config
import os
import re

import yaml


def _env_flag(name: str, *, default: bool = False) -> bool:
  value = os.environ.get(name)
  if value is None:
    return default
  return value.strip().lower() in {"1", "true", "yes", "on", "y"}


def _expand_env_vars(config_text: str) -> str:
  # ${VAR:-default}
  def replace_env_vars(match) -> str:
    return os.environ.get(match.group(1), match.group(2))

  return re.sub(r'\$\{([^}:]+):-([^}]+)\}', replace_env_vars, config_text)


def _add_file_handler(config: dict, filename: str) -> None:
  """Send the package's log records, at every level, to `filename` as well."""
  log_dir = os.path.dirname(filename)
  if log_dir:
    os.makedirs(log_dir, exist_ok=True)
  config.setdefault("handlers", {})["file"] = {
    "class": "logging.FileHandler",
    "level": "DEBUG",
    "formatter": "detailed",
    "filename": filename,
    "encoding": "utf-8",
  }
  package_logger = config.setdefault("loggers", {}).setdefault("InlineBlanks", {})
  package_logger.setdefault("handlers", []).append("file")


def setup_logging() -> None:
  config_path = os.path.join(os.path.dirname(__file__), 'logging.yaml')
  if os.path.exists(config_path):
    with open(config_path, 'r') as f:
      config = yaml.safe_load(_expand_env_vars(f.read()))

    # File logging is opt-in: set INLINEBLANKS_LOG_FILE to a path
    log_file = os.environ.get("INLINEBLANKS_LOG_FILE")
    if log_file:
      _add_file_handler(config, log_file)
    logging.config.dictConfig(config)
  else:
    logging.basicConfig(level=logging.INFO)

# Call this once when your application starts
setup_logging()
