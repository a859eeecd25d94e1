import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

DEFAULT_BASE_URL = "https://rahulshettyacademy.com/seleniumPractise/#/"
DEFAULT_SPECS_FOLDER = Path(__file__).parent / "specs"
DEFAULT_VIDEO_CRF = 32


class TargetConfig(BaseModel):
    url: str = DEFAULT_BASE_URL


class E2EConfig(BaseModel):
    """Which files are spec files and where run artifacts go."""

    specs_folder: Optional[str] = None
    spec_pattern: str = "validations/*_spec.py"
    screenshot_on_run_failure: bool = True
    screenshots_folder: str = "artifacts/screenshots"
    video: bool = False
    videos_folder: str = "artifacts/videos"
    # Constant rate factor handed to ffmpeg; 0 keeps the raw recording
    video_compression: int = Field(default=DEFAULT_VIDEO_CRF, ge=0, le=51)
    trash_assets_before_runs: bool = True
    default_command_timeout: int = Field(default=4000, gt=0)

    @field_validator("video_compression", mode="before")
    @classmethod
    def _bool_compression(cls, value: Any) -> Any:
        if isinstance(value, bool):
            return DEFAULT_VIDEO_CRF if value else 0
        return value

    @field_validator("spec_pattern")
    @classmethod
    def _non_empty_pattern(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("spec_pattern must not be empty")
        return value

    def resolved_specs_folder(self) -> Path:
        return Path(self.specs_folder) if self.specs_folder else DEFAULT_SPECS_FOLDER


class ViewportConfig(BaseModel):
    width: int = Field(default=1280, gt=0)
    height: int = Field(default=720, gt=0)


class BrowserConfig(BaseModel):
    headless: bool = True
    viewport: ViewportConfig = Field(default_factory=ViewportConfig)
    language: str = "en-US"


class LogConfig(BaseModel):
    level: str = "info"
    folder: str = "./logs"


class ReportConfig(BaseModel):
    folder: str = "reports"


class RunnerConfig(BaseModel):
    target: TargetConfig = Field(default_factory=TargetConfig)
    e2e: E2EConfig = Field(default_factory=E2EConfig)
    browser_config: BrowserConfig = Field(default_factory=BrowserConfig)
    log: LogConfig = Field(default_factory=LogConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)

    @property
    def base_url(self) -> str:
        return self.target.url


def _env_flag(name: str) -> Optional[bool]:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return None
    return raw.strip().lower() in ("1", "true", "yes", "on")


def apply_env_overrides(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Environment variables take priority over the config file."""
    raw = dict(raw or {})

    base_url = os.getenv("GREENKART_BASE_URL")
    if base_url:
        raw["target"] = {**(raw.get("target") or {}), "url": base_url}

    headless = _env_flag("GREENKART_HEADLESS")
    if os.getenv("DOCKER_ENV") == "true":
        if headless is False or (raw.get("browser_config") or {}).get("headless") is False:
            logging.warning("Docker environment detected, forcing headless mode")
        headless = True
    if headless is not None:
        raw["browser_config"] = {**(raw.get("browser_config") or {}), "headless": headless}

    video = _env_flag("GREENKART_VIDEO")
    if video is not None:
        raw["e2e"] = {**(raw.get("e2e") or {}), "video": video}

    return raw


def find_config_file(args_config: Optional[str] = None, script_dir: Optional[str] = None) -> str:
    """Find the configuration file, command line argument first."""
    if args_config:
        if os.path.isfile(args_config):
            return args_config
        raise FileNotFoundError(f"Specified config file not found: {args_config}")

    current_dir = os.getcwd()
    script_dir = script_dir or current_dir
    default_paths = [
        os.path.join(current_dir, "config", "config.yaml"),
        os.path.join(script_dir, "config", "config.yaml"),
        os.path.join(current_dir, "config.yaml"),
        os.path.join(script_dir, "config.yaml"),
    ]

    for path in default_paths:
        if os.path.isfile(path):
            return path

    searched = "\n".join(f"   - {path}" for path in default_paths)
    raise FileNotFoundError(f"Config file does not exist, searched:\n{searched}")


def load_config(path: Optional[str] = None) -> RunnerConfig:
    """Read YAML from ``path`` (defaults only when None) and validate it."""
    raw: Dict[str, Any] = {}
    if path is not None:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Config file {path} must contain a mapping at top level")

    return RunnerConfig.model_validate(apply_env_overrides(raw))
