"""
Configuration loader for Zika R0 estimation.
Loads YAML config and provides access to settings.
"""
import yaml
from pathlib import Path
from typing import Any, Dict, Optional

from zika_r0.common.paths import find_project_root


def get_project_root() -> Path:
    """Get the project root directory (the one containing `config/`)."""
    return find_project_root(Path(__file__).parent.parent)


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file.
    
    Args:
        config_path: Path to config file. Defaults to config/config_default.yaml
        
    Returns:
        Dictionary containing all configuration settings
    """
    if config_path is None:
        config_path = get_project_root() / "config" / "config_default.yaml"
    else:
        config_path = Path(config_path)
    
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    
    with open(config_path, 'r') as f:
        config = yaml.safe_load(f)
    
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValueError(f"Config file must contain a mapping at top level: {config_path}")
    return config


def get_data_path(relative_path: str) -> Path:
    """
    Get absolute path for a data or results file.
    
    Args:
        relative_path: Path relative to project root (e.g., "data/raw/dept_totals.csv")
        
    Returns:
        Absolute Path object (absolute inputs are returned unchanged)
    """
    path = Path(relative_path)
    if path.is_absolute():
        return path
    return get_project_root() / path


# Convenience: load default config on module import
try:
    CONFIG = load_config()
except FileNotFoundError:
    CONFIG = {}
