"""
Loads and handles site configuration from a YAML file.
Deployment overrides (SITE_OUTPUT_DIR, SITE_DATA_SOURCE, SITE_ROUTER) are read from the environment / .env
"""
import os
from typing import Any, Dict, List, Mapping, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from core.mappings import stringify_keys

ENV_OVERRIDES = {
    "SITE_OUTPUT_DIR": "output_dir",
    "SITE_DATA_SOURCE": "data_source",
    "SITE_ROUTER": "router",
}


class SiteConfig(BaseModel):
    """
    Configuration of a single site. Keys not declared here are kept, so
    rules and templates can read arbitrary site settings.
    """
    model_config = ConfigDict(extra="allow")

    output_dir: str = "output"  # Where compiled reps are written
    data_source: str = "filesystem"  # Name of the data source plugin
    router: str = "default"  # Name of the router plugin
    index_filenames: List[str] = ["index.html"]  # Stripped from rep paths

    site_root: str = "."  # Read by the filesystem data source
    cache_path: str = "tmp/compile_cache.db"  # mtime cache


DEFAULT_CONFIG = SiteConfig()


def merge_config(defaults: SiteConfig, overrides: Optional[Mapping[str, Any]]) -> SiteConfig:
    """
    Lay overrides over defaults and validate the result.
    Neither argument is modified.
    """
    merged: Dict[str, Any] = defaults.model_dump()
    merged.update(stringify_keys(dict(overrides or {})))
    return SiteConfig.model_validate(merged)


def _env_overrides() -> Dict[str, str]:
    return {key: os.environ[env] for env, key in ENV_OVERRIDES.items() if os.environ.get(env)}


def load_config(path: str = "config.yaml") -> SiteConfig:
    """Load site configuration from a YAML file, then apply environment overrides."""
    load_dotenv()

    if not os.path.exists(path):
        raise FileNotFoundError(f"Cannot find site configuration {path}")

    with open(path, "r") as file:
        data = yaml.safe_load(file) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Site configuration {path} must be a mapping")

    # Relative site roots are relative to the configuration file
    data = stringify_keys(data)
    config_dir = os.path.dirname(os.path.abspath(path))
    site_root = str(data.get("site_root") or ".")
    data["site_root"] = os.path.normpath(os.path.join(config_dir, site_root))
    data.update(_env_overrides())

    return merge_config(DEFAULT_CONFIG, data)
