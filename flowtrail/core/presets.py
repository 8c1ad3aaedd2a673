"""
Flow Presets Library - Pre-configured flow field settings
Allows users to switch between field styles with a single flag
"""

import logging
import yaml
from pathlib import Path
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field

from .config import FlowConfig

logger = logging.getLogger(__name__)


# ============================================================================
# Preset Data Structures
# ============================================================================

@dataclass
class FlowPreset:
    """A named set of FlowConfig overrides"""

    name: str
    description: str = ""

    # Only the fields that differ from FlowConfig defaults
    settings: Dict[str, Any] = field(default_factory=dict)

    # Export defaults
    frames: int = 120
    format: str = "gif"

    # Tags for organization
    tags: List[str] = field(default_factory=list)

    def to_config(self, **overrides) -> FlowConfig:
        """Build a FlowConfig from the preset, with explicit overrides on top"""
        data = dict(self.settings)
        data.update({k: v for k, v in overrides.items() if v is not None})
        return FlowConfig.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for YAML serialization"""
        return {
            'name': self.name,
            'description': self.description,
            'settings': dict(self.settings),
            'frames': self.frames,
            'format': self.format,
            'tags': list(self.tags),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FlowPreset':
        """Create from dictionary; flat FlowConfig keys are gathered into settings"""
        data = dict(data)
        settings = dict(data.pop('settings', None) or {})

        config_fields = set(FlowConfig.__dataclass_fields__)
        for key in list(data):
            if key in config_fields:
                settings[key] = data.pop(key)

        valid_fields = {f for f in cls.__dataclass_fields__} - {'settings'}
        filtered = {k: v for k, v in data.items() if k in valid_fields}

        # Fail early on bad values rather than at render time
        FlowConfig.from_dict(settings)

        return cls(settings=settings, **filtered)


# ============================================================================
# Built-in Presets
# ============================================================================

BUILTIN_PRESETS: Dict[str, Dict[str, Any]] = {
    "hazadus": {
        "name": "hazadus",
        "description": "Purple trails swirling over gradient-filled text",
        "settings": {
            "field_mode": "pixel",
            "heading_mode": "smoothed",
            "text": "HAZADUS",
            "font": "Impact",
            "gradient": "radial",
        },
        "tags": ["text", "smooth"],
    },

    "hazadus_direct": {
        "name": "hazadus_direct",
        "description": "Text field with hard turns straight onto the cell angle",
        "settings": {
            "field_mode": "pixel",
            "heading_mode": "direct",
            "gradient": "linear",
        },
        "tags": ["text", "sharp"],
    },

    "procedural_waves": {
        "name": "procedural_waves",
        "description": "Tight sine/cosine spirals",
        "settings": {
            "field_mode": "procedural",
            "heading_mode": "direct",
            "zoom": 0.11,
            "curve": 16,
            "max_trail_length": 60,
        },
        "tags": ["procedural", "spiral"],
    },

    "procedural_soft": {
        "name": "procedural_soft",
        "description": "Gentle wave flow over the whole surface",
        "settings": {
            "field_mode": "procedural",
            "heading_mode": "direct",
            "zoom": 0.5,
            "curve": 0.6,
        },
        "tags": ["procedural", "calm"],
    },

    "noise_drift": {
        "name": "noise_drift",
        "description": "Slow organic drift through Perlin noise",
        "settings": {
            "field_mode": "noise",
            "heading_mode": "smoothed",
            "curve": 1.0,
            "noise_scale": 16.0,
            "palette": ["#0B3954", "#087E8B", "#BFD7EA", "#FF5A5F", "#C81D25"],
        },
        "tags": ["noise", "calm"],
    },
}


# ============================================================================
# Preset Manager
# ============================================================================

class PresetManager:
    """
    Manages loading and saving flow presets.
    """

    def __init__(self, user_presets_dir: Optional[Path] = None):
        """
        Initialize preset manager.

        Args:
            user_presets_dir: Directory for user presets (default: ~/.flowtrail/presets)
        """
        self.user_presets_dir = Path(user_presets_dir or Path.home() / '.flowtrail' / 'presets')

        self._builtin: Dict[str, FlowPreset] = {}
        self._user: Dict[str, FlowPreset] = {}

        self._load_builtin_presets()
        self._load_user_presets()

    def _load_builtin_presets(self) -> None:
        for name, data in BUILTIN_PRESETS.items():
            self._builtin[name] = FlowPreset.from_dict(data)

    def _load_user_presets(self) -> None:
        """Load user-defined presets from YAML files"""
        if not self.user_presets_dir.is_dir():
            return

        for yaml_file in sorted(self.user_presets_dir.glob('*.yaml')):
            try:
                with open(yaml_file, 'r') as f:
                    data = yaml.safe_load(f)

                if isinstance(data, dict):
                    if 'presets' in data:
                        # Multiple presets in one file
                        for name, preset_data in data['presets'].items():
                            preset_data['name'] = name
                            self._user[name] = FlowPreset.from_dict(preset_data)
                    else:
                        # Single preset
                        name = data.get('name') or yaml_file.stem
                        data['name'] = name
                        self._user[name] = FlowPreset.from_dict(data)
            except (OSError, yaml.YAMLError, TypeError, ValueError, AttributeError) as e:
                logger.warning("Could not load preset file %s: %s", yaml_file, e)

    def get(self, name: str) -> Optional[FlowPreset]:
        """
        Get a preset by name.
        User presets override built-in presets with same name.
        """
        return self._user.get(name) or self._builtin.get(name)

    def exists(self, name: str) -> bool:
        return name in self._user or name in self._builtin

    def is_builtin(self, name: str) -> bool:
        return name in self._builtin and name not in self._user

    def list_all(self) -> List[str]:
        """List all preset names"""
        return sorted(set(self._builtin) | set(self._user))

    def list_by_tag(self, tag: str) -> List[str]:
        """List presets with a specific tag"""
        matches = []
        for name, preset in {**self._builtin, **self._user}.items():
            if tag.lower() in [t.lower() for t in preset.tags]:
                matches.append(name)
        return sorted(matches)

    def list_tags(self) -> List[str]:
        tags = set()
        for preset in {**self._builtin, **self._user}.values():
            tags.update(preset.tags)
        return sorted(tags)

    def save_preset(self, preset: FlowPreset, filename: Optional[str] = None) -> Path:
        """
        Save a user preset to YAML file.

        Args:
            preset: The preset to save
            filename: Optional filename (default: preset.name.yaml)

        Returns:
            Path to saved file
        """
        filename = filename or f"{preset.name}.yaml"
        if not filename.endswith('.yaml'):
            filename += '.yaml'

        self.user_presets_dir.mkdir(parents=True, exist_ok=True)
        filepath = self.user_presets_dir / filename

        with open(filepath, 'w') as f:
            yaml.safe_dump(preset.to_dict(), f, default_flow_style=False, sort_keys=False)

        self._user[preset.name] = preset

        return filepath

    def delete_preset(self, name: str) -> bool:
        """
        Delete a user preset.

        Returns:
            True if deleted, False if not found or is builtin
        """
        if name not in self._user:
            return False

        for yaml_file in self.user_presets_dir.glob('*.yaml'):
            if yaml_file.stem == name:
                yaml_file.unlink()
                break

        del self._user[name]
        return True

    def create_preset(
        self,
        name: str,
        config: FlowConfig,
        description: str = "",
        **kwargs
    ) -> FlowPreset:
        """Capture the settings of a config that differ from the defaults"""
        defaults = FlowConfig().to_dict()
        settings = {k: v for k, v in config.to_dict().items() if defaults.get(k) != v}
        return FlowPreset(name=name, description=description, settings=settings, **kwargs)

    def search(self, query: str) -> List[str]:
        """Search presets by name, description, or tags"""
        query = query.lower()
        matches = []

        for name, preset in {**self._builtin, **self._user}.items():
            if (query in name.lower() or
                query in preset.description.lower() or
                any(query in tag.lower() for tag in preset.tags)):
                matches.append(name)

        return sorted(matches)


# ============================================================================
# Global Instance & Convenience Functions
# ============================================================================

_manager: Optional[PresetManager] = None


def get_preset_manager() -> PresetManager:
    """Get or create global preset manager"""
    global _manager
    if _manager is None:
        _manager = PresetManager()
    return _manager


def get_preset(name: str) -> Optional[FlowPreset]:
    return get_preset_manager().get(name)


def list_presets(tag: Optional[str] = None) -> List[str]:
    """List available presets, optionally filtered by tag"""
    manager = get_preset_manager()
    if tag:
        return manager.list_by_tag(tag)
    return manager.list_all()
