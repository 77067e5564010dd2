"""Configuration management for link-keepalive."""

import os
import json
import logging
from pathlib import Path
from typing import Optional, Dict, Any, List, Mapping
from pydantic import ValidationError
from dotenv import load_dotenv

from link_keepalive.exceptions import ConfigurationError
from link_keepalive.heuristics import ProbeHeuristics, load_heuristics
from link_keepalive.models import KeepAliveConfig
from link_keepalive.utils import validate_url

logger = logging.getLogger(__name__)

TRUE_VALUES = ('true', '1', 'yes')
FALSE_VALUES = ('false', '0', 'no')


class Config:
    """Configuration resolved once at startup and passed to every component."""

    # Environment variable -> (field, parser)
    ENV_FIELDS = {
        'MAX_RETRIES': ('max_retries', int),
        'PAGE_TIMEOUT': ('page_timeout', int),
        'WAIT_TIME': ('wait_time', int),
        'RENDER_WAIT': ('render_wait', int),
        'DOWNLOAD_BYTES': ('download_bytes', int),
        'DOWNLOAD_TIMEOUT': ('download_timeout', float),
        'PLAYWRIGHT_CHROMIUM_EXECUTABLE_PATH': ('chromium_executable', str),
        'USER_AGENT': ('user_agent', str),
        'KEEPALIVE_HEURISTICS': ('heuristics_path', Path),
        'KEEPALIVE_LOG_FILE': ('log_file', str),
    }

    def __init__(self, config_path: Optional[str] = None,
                 environ: Optional[Mapping[str, str]] = None):
        """
        Initialize configuration from file, environment and defaults.

        Args:
            config_path: Explicit config file; searched for when omitted
            environ: Environment mapping; ``.env`` plus ``os.environ`` when omitted
        """
        if environ is None:
            load_dotenv()
            environ = os.environ

        self.config_path = config_path or self._find_config_file()
        self._values: Dict[str, Any] = {}
        self._heuristics_data: Optional[Dict[str, Any]] = None

        if self.config_path and Path(self.config_path).exists():
            self._load_from_file()

        self._load_from_env(environ)
        self.keepalive = self._build(self._values)

    def _find_config_file(self) -> Optional[str]:
        """Find configuration file in common locations."""
        search_paths = [
            Path.cwd() / "keepalive_config.py",
            Path.cwd() / "keepalive_config.json",
            Path.home() / ".link-keepalive" / "config.py",
            Path.home() / ".link-keepalive" / "config.json",
        ]

        for path in search_paths:
            if path.exists():
                return str(path)

        return None

    def _load_from_file(self):
        """Load configuration from file."""
        path = Path(self.config_path)

        if path.suffix == '.py':
            self._load_python_config(path)
        elif path.suffix == '.json':
            self._load_json_config(path)
        else:
            raise ConfigurationError(f"Unsupported config file type: {path}")

    def _load_python_config(self, path: Path):
        """Load configuration from Python file."""
        import importlib.util

        spec = importlib.util.spec_from_file_location("keepalive_config", path)
        if spec and spec.loader:
            config_module = importlib.util.module_from_spec(spec)
            spec.loader.exec_module(config_module)

            if hasattr(config_module, 'KEEPALIVE_CONFIG'):
                self._values.update(config_module.KEEPALIVE_CONFIG)

            if hasattr(config_module, 'HEURISTICS'):
                self._heuristics_data = dict(config_module.HEURISTICS)

    def _load_json_config(self, path: Path):
        """Load configuration from JSON file."""
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e

        if 'keepalive' in data:
            self._values.update(data['keepalive'])

        if 'heuristics' in data:
            self._heuristics_data = dict(data['heuristics'])

    def _load_from_env(self, environ: Mapping[str, str]):
        """Override configuration with environment variables."""
        urls = environ.get('KEEPALIVE_URLS') or environ.get('GOFILE_URLS')
        if urls:
            self._values['urls'] = urls

        for name, (field, parser) in self.ENV_FIELDS.items():
            raw = environ.get(name)
            if raw is None or raw.strip() == '':
                continue
            try:
                self._values[field] = parser(raw.strip())
            except ValueError as e:
                raise ConfigurationError(f"Invalid value for {name}: {raw!r}") from e

        if (headless := environ.get('HEADLESS')) is not None:
            self._values['headless'] = headless.strip().lower() not in FALSE_VALUES

        for name, field in (('VERBOSE', 'verbose'), ('VERIFY_SSL', 'verify_ssl'),
                            ('BLOCK_RESOURCES', 'block_resources')):
            if (raw := environ.get(name)) is not None and raw.strip():
                self._values[field] = raw.strip().lower() in TRUE_VALUES

    @staticmethod
    def _build(values: Dict[str, Any]) -> KeepAliveConfig:
        try:
            return KeepAliveConfig(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    def update(self, **overrides: Any):
        """Apply overrides (e.g. from the command line), skipping ``None`` values."""
        values = self.keepalive.model_dump()
        values.update({k: v for k, v in overrides.items() if v is not None})
        self.keepalive = self._build(values)

    def heuristics(self) -> ProbeHeuristics:
        """Resolve the probe heuristics table."""
        if self.keepalive.heuristics_path:
            return load_heuristics(self.keepalive.heuristics_path)

        if self._heuristics_data is not None:
            try:
                return ProbeHeuristics(**self._heuristics_data)
            except ValidationError as e:
                raise ConfigurationError(f"Invalid heuristics: {e}") from e

        return load_heuristics()

    def targets(self) -> List[str]:
        return parse_targets(self.keepalive.urls)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            'keepalive': self.keepalive.model_dump(mode='json'),
            'heuristics': self.heuristics().model_dump(mode='json'),
        }

    def save(self, path: Optional[str] = None):
        """Save configuration to file."""
        save_path = Path(path or self.config_path or './keepalive_config.json')

        if save_path.suffix == '.py':
            self._save_python_config(save_path)
        else:
            self._save_json_config(save_path)

    def _save_python_config(self, path: Path):
        """Save configuration as Python file."""
        data = self.to_dict()
        config_str = '"""Configuration file for link-keepalive."""\n\n'
        config_str += '# Keep-alive run settings\n'
        config_str += f"KEEPALIVE_CONFIG = {_format_dict(data['keepalive'])}\n\n"
        config_str += '# Probe selectors and link patterns\n'
        config_str += f"HEURISTICS = {_format_dict(data['heuristics'])}\n"

        with open(path, 'w', encoding='utf-8') as f:
            f.write(config_str)

    def _save_json_config(self, path: Path):
        """Save configuration as JSON file."""
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2)


def _format_dict(data: Dict[str, Any]) -> str:
    lines = ['{']
    for key, value in data.items():
        lines.append(f"    {key!r}: {value!r},")
    lines.append('}')
    return '\n'.join(lines)


def parse_targets(raw: Optional[str]) -> List[str]:
    """
    Parse the newline-separated target list.

    Args:
        raw: Multi-line string with one candidate URL per line

    Returns:
        Valid absolute URLs in their original order, duplicates kept

    Raises:
        ConfigurationError: If no line holds a valid URL
    """
    targets = []

    for line in (raw or '').splitlines():
        candidate = line.strip()
        if not candidate:
            continue

        if validate_url(candidate):
            targets.append(candidate)
        else:
            logger.warning(f"Invalid URL format: {candidate}")

    if not targets:
        raise ConfigurationError("No valid targets found in KEEPALIVE_URLS")

    logger.info(f"Found {len(targets)} valid URLs to process")
    return targets


def load_config(config_path: Optional[str] = None) -> Config:
    """Load configuration from file or create default."""
    return Config(config_path)


def create_default_config(path: str = './keepalive_config.py'):
    """Create a default configuration file."""
    config = Config(environ={})
    config.update(urls="https://gofile.io/d/example")
    config.config_path = path
    config.save(path)
