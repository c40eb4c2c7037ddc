"""
Content Configuration

Describes where the support-matrix content lives and the fixed naming rules
the loaders rely on.

Configuration is loaded from (in order of precedence):
1. Environment variables (SUPPORTMATRIX_CONTENT_PATH, SUPPORTMATRIX_DEV)
2. User config file (~/.config/supportmatrix/config.json)
3. Project config file (.supportmatrix/config.json in the project root)
4. Default paths
"""

import os
import json
from pathlib import Path
from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, Any, List


@dataclass
class ContentConfig:
    """Configuration for the content loaders."""

    content_root: Path = field(default_factory=lambda: Path('support-matrix'))
    """Root directory of the support-matrix content checkout."""

    skip_dirs: List[str] = field(default_factory=lambda: ['assets', '.github', 'report-template'])
    """Top-level directories that never hold a board."""

    board_document: str = 'README.md'
    """Fixed file name of the per-board document."""

    bulk_document: str = 'others.yml'
    """Fixed file name of the per-board bulk report list."""

    metadata_document: str = 'assets/metadata.yml'
    """Shared category/metadata document, relative to content_root."""

    secondary_language_suffix: str = '_zh'
    """Report file stems ending with this suffix are translations and skipped."""

    device_index: Optional[Path] = None
    """Directory of package-index device entries (``*.toml``). Optional."""

    dev_mode: bool = False
    """Enables the development-only cache debug surface."""

    def __post_init__(self):
        if isinstance(self.content_root, str):
            self.content_root = Path(self.content_root)
        if isinstance(self.device_index, str):
            self.device_index = Path(self.device_index)

    @property
    def metadata_path(self) -> Path:
        return self.content_root / self.metadata_document

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = asdict(self)
        result['content_root'] = str(self.content_root)
        result['device_index'] = str(self.device_index) if self.device_index else None
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ContentConfig':
        """Create from dictionary."""
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


def _find_project_root() -> Optional[Path]:
    """Find the project root by looking for pyproject.toml."""
    current = Path.cwd()
    for parent in [current] + list(current.parents):
        if (parent / 'pyproject.toml').exists():
            return parent
    return None


def _get_default_content_root() -> Path:
    project_root = _find_project_root()
    if project_root:
        return project_root / 'support-matrix'
    return Path.cwd() / 'support-matrix'


def _load_config_file(path: Path) -> Optional[Dict[str, Any]]:
    """Load configuration from a JSON file."""
    if path.exists():
        try:
            with open(path) as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError):
            pass
    return None


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def get_config() -> ContentConfig:
    """
    Get the content configuration.

    Loads configuration from environment variables and config files,
    with sensible defaults.

    Returns:
        ContentConfig instance
    """
    config_data: Dict[str, Any] = {}

    # 1. Start with defaults
    config_data['content_root'] = _get_default_content_root()

    # 2. Load project config (.supportmatrix/config.json)
    project_root = _find_project_root()
    if project_root:
        project_config = _load_config_file(project_root / '.supportmatrix' / 'config.json')
        if project_config:
            config_data.update(project_config)

    # 3. Load user config (~/.config/supportmatrix/config.json)
    user_config_dir = Path(os.environ.get('XDG_CONFIG_HOME', Path.home() / '.config'))
    user_config = _load_config_file(user_config_dir / 'supportmatrix' / 'config.json')
    if user_config:
        config_data.update(user_config)

    # 4. Environment variables (highest precedence)
    env_content_path = os.environ.get('SUPPORTMATRIX_CONTENT_PATH')
    if env_content_path:
        config_data['content_root'] = env_content_path

    env_dev = os.environ.get('SUPPORTMATRIX_DEV')
    if env_dev is not None:
        config_data['dev_mode'] = _env_flag(env_dev)

    return ContentConfig.from_dict(config_data)
