"""
Gesture profiles and centralized configuration manager.

A GestureProfile is the immutable bundle of thresholds and buffer settings
a session is built from. Two built-in profiles reproduce the still-image
(video file) and live-stream code paths; YAML files can override either or
derive new profiles from them.
"""

import os
import logging
from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

_BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
_CONFIG_DIR = os.path.join(_BASE_DIR, "config")

DEFAULT_PROFILE = "live_stream"


class MotionMode(Enum):
    """How adjacent-frame wrist deltas are combined in the static check."""
    ALL_PAIRS = "all_pairs"
    LAST_PAIR = "last_pair"


class TiePolicy(Enum):
    """Which horizontal direction a step with exactly equal x counts as."""
    NONE = "none"
    LEFT = "left"
    RIGHT = "right"
    BOTH = "both"


class ProximityMetric(Enum):
    """Distance test used when comparing corresponding landmarks of two hands."""
    AXIS = "axis"   # |dx| and |dy| each below threshold
    L1 = "l1"       # |dx| + |dy| + |dz| below threshold


def _parse_enum(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        choices = ", ".join(m.value for m in enum_cls)
        raise ValueError(f"Invalid {enum_cls.__name__} '{value}' (expected one of: {choices})")


def _require_positive(name: str, value) -> None:
    if value is not None and value <= 0:
        raise ValueError(f"{name} must be positive, got {value!r}")


def _number(config: dict, key: str, default, optional: bool = False):
    """Read a float setting; ``optional`` keys accept null as "unchecked"."""
    value = config.get(key, default)
    if value is None and optional:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{key} must be a number, got {value!r}")


def _integer(config: dict, key: str, default) -> int:
    value = config.get(key, default)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{key} must be an integer, got {value!r}")


def _section(config: dict, key: str) -> dict:
    value = config.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{key} must be a mapping, got {value!r}")
    return value


def _parse_thumb_vectors(pairs) -> Tuple[Tuple[int, int], ...]:
    """Normalize thumb joint pairs (lists from YAML included) to a tuple of tuples.

    Joints are numbered along the thumb: 0 = wrist, 1 = CMC, 2 = MCP, 3 = IP, 4 = tip.
    """
    try:
        parsed = tuple((int(start), int(end)) for start, end in pairs)
    except (TypeError, ValueError):
        raise ValueError(f"thumb_vectors must be a list of [from, to] joint pairs, got {pairs!r}")
    if len(parsed) < 2:
        raise ValueError("thumb_vectors needs a reference pair and at least one pair to compare")
    for start, end in parsed:
        if not (0 <= start <= 4 and 0 <= end <= 4) or start == end:
            raise ValueError(f"Invalid thumb joint pair ({start}, {end})")
    return parsed


@dataclass(frozen=True)
class StaticGestureConfig:
    """Thresholds for single-hand pose rules."""
    ok_threshold: float = 40.0
    # Minimum MCP->PIP / MCP->DIP similarity of the four fingers for OK (None = unchecked)
    ok_min_straightness: Optional[float] = 0.8
    # Max L1 of (DIP, MCP) pairs for a curled finger (None = unchecked)
    thumb_curl_threshold: Optional[float] = None
    # Require fingertips folded back towards the wrist, mirrored by handedness
    thumb_fist_bounds: bool = True
    palm_open_threshold: float = 0.85
    # Thumb straightness: (from, to) joint vectors; the first is the reference
    # the others must align with
    thumb_vectors: Tuple[Tuple[int, int], ...] = ((2, 3), (2, 4), (3, 4))

    def __post_init__(self):
        _require_positive("ok_threshold", self.ok_threshold)
        _require_positive("thumb_curl_threshold", self.thumb_curl_threshold)
        object.__setattr__(self, "thumb_vectors", _parse_thumb_vectors(self.thumb_vectors))

    @classmethod
    def from_dict(cls, config: dict) -> "StaticGestureConfig":
        """Create config from dictionary."""
        defaults = cls()
        return cls(
            ok_threshold=_number(config, "ok_threshold", defaults.ok_threshold),
            ok_min_straightness=_number(config, "ok_min_straightness",
                                        defaults.ok_min_straightness, optional=True),
            thumb_curl_threshold=_number(config, "thumb_curl_threshold",
                                         defaults.thumb_curl_threshold, optional=True),
            thumb_fist_bounds=bool(config.get("thumb_fist_bounds", defaults.thumb_fist_bounds)),
            palm_open_threshold=_number(config, "palm_open_threshold", defaults.palm_open_threshold),
            thumb_vectors=config.get("thumb_vectors", defaults.thumb_vectors),
        )


@dataclass(frozen=True)
class DynamicGestureConfig:
    """Settings for directional motion gestures."""
    tie_policy: TiePolicy = TiePolicy.NONE
    # Image space: y grows downward, so moving down increases y
    down_is_positive_y: bool = True

    def __post_init__(self):
        object.__setattr__(self, "tie_policy", _parse_enum(TiePolicy, self.tie_policy))

    @classmethod
    def from_dict(cls, config: dict) -> "DynamicGestureConfig":
        """Create config from dictionary."""
        return cls(
            tie_policy=config.get("tie_policy", TiePolicy.NONE),
            down_is_positive_y=bool(config.get("down_is_positive_y", True)),
        )


@dataclass(frozen=True)
class TwoHandConfig:
    """Settings for symmetric two-hand poses."""
    threshold: float = 30.0
    metric: ProximityMetric = ProximityMetric.L1
    include_mcp: bool = True
    scale: float = 512.0

    def __post_init__(self):
        object.__setattr__(self, "metric", _parse_enum(ProximityMetric, self.metric))
        _require_positive("two_hand.threshold", self.threshold)
        _require_positive("two_hand.scale", self.scale)

    @classmethod
    def from_dict(cls, config: dict) -> "TwoHandConfig":
        """Create config from dictionary."""
        defaults = cls()
        return cls(
            threshold=_number(config, "threshold", defaults.threshold),
            metric=config.get("metric", defaults.metric),
            include_mcp=bool(config.get("include_mcp", defaults.include_mcp)),
            scale=_number(config, "scale", defaults.scale),
        )


@dataclass(frozen=True)
class GestureProfile:
    """Complete, immutable configuration of a gesture session.

    Defaults match the live-stream path; use ``still_image()`` for the
    threshold set tuned on still frames extracted from video files.
    """
    name: str = DEFAULT_PROFILE
    frame_buffer_size: int = 4
    # Multiplier applied to normalized landmark coordinates before use
    scale: float = 512.0
    static_threshold: float = 3.5
    motion_mode: MotionMode = MotionMode.ALL_PAIRS
    static: StaticGestureConfig = field(default_factory=StaticGestureConfig)
    dynamic: DynamicGestureConfig = field(default_factory=DynamicGestureConfig)
    two_hand: TwoHandConfig = field(default_factory=TwoHandConfig)

    def __post_init__(self):
        object.__setattr__(self, "motion_mode", _parse_enum(MotionMode, self.motion_mode))
        if self.frame_buffer_size < 2:
            raise ValueError(f"frame_buffer_size must be at least 2, got {self.frame_buffer_size!r}")
        _require_positive("scale", self.scale)
        _require_positive("static_threshold", self.static_threshold)

    @classmethod
    def live_stream(cls) -> "GestureProfile":
        """Threshold set of the real-time camera path."""
        return cls()

    @classmethod
    def still_image(cls) -> "GestureProfile":
        """Threshold set of the video-file / still-frame path."""
        return cls(
            name="still_image",
            frame_buffer_size=5,
            scale=512.0,
            static_threshold=2.5,
            static=StaticGestureConfig(
                ok_threshold=0.3,
                ok_min_straightness=None,
                thumb_curl_threshold=0.35,
                thumb_fist_bounds=False,
                palm_open_threshold=0.95,
                thumb_vectors=((1, 2), (1, 3), (1, 4)),
            ),
            dynamic=DynamicGestureConfig(tie_policy=TiePolicy.RIGHT),
            two_hand=TwoHandConfig(
                threshold=5.0,
                metric=ProximityMetric.AXIS,
                include_mcp=False,
                scale=256.0,
            ),
        )

    @classmethod
    def from_dict(cls, config: dict) -> "GestureProfile":
        """Create profile from dictionary (missing keys take live-stream defaults)."""
        defaults = cls()
        return cls(
            name=str(config.get("name", defaults.name)),
            frame_buffer_size=_integer(config, "frame_buffer_size", defaults.frame_buffer_size),
            scale=_number(config, "scale", defaults.scale),
            static_threshold=_number(config, "static_threshold", defaults.static_threshold),
            motion_mode=config.get("motion_mode", defaults.motion_mode),
            static=StaticGestureConfig.from_dict(_section(config, "static")),
            dynamic=DynamicGestureConfig.from_dict(_section(config, "dynamic")),
            two_hand=TwoHandConfig.from_dict(_section(config, "two_hand")),
        )

    def to_dict(self) -> dict:
        """Plain-dict form with enums as their string values."""
        def _plain(value):
            if isinstance(value, Enum):
                return value.value
            if isinstance(value, dict):
                return {k: _plain(v) for k, v in value.items()}
            return value

        return _plain(asdict(self))

    def with_overrides(self, **changes) -> "GestureProfile":
        """Copy of this profile with top-level fields replaced."""
        return replace(self, **changes)


BUILTIN_PROFILES = {
    "live_stream": GestureProfile.live_stream,
    "still_image": GestureProfile.still_image,
}


def builtin_profile(name: str) -> GestureProfile:
    """Look up a built-in profile by name."""
    try:
        return BUILTIN_PROFILES[name]()
    except KeyError:
        choices = ", ".join(sorted(BUILTIN_PROFILES))
        raise ValueError(f"Unknown gesture profile '{name}' (built-in: {choices})") from None


# Top-level sections and the expected type of each known key
_CONFIG_SCHEMA = {
    "session": {
        "profile": str,
    },
    "logging": {
        "level": str,
        "file": str,
        "max_size_mb": (int, float),
        "backup_count": int,
    },
}

_PROFILE_SECTIONS = ("static", "dynamic", "two_hand")


def _deep_merge(base: dict, override: dict) -> dict:
    """Return ``base`` with ``override`` merged in, recursing into nested mappings."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _type_name(expected) -> str:
    if isinstance(expected, tuple):
        return " or ".join(t.__name__ for t in expected)
    return expected.__name__


class Config:
    """Singleton holding the loaded config.yaml.

    Loading never fails: a missing or malformed file falls back to the
    built-in defaults, and schema mismatches are only logged. Profile
    values themselves are validated when ``get_profile`` builds them.
    """

    _instance = None
    _data = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def load(self, config_path=None):
        """Read a YAML config file (default: ``config/config.yaml``)."""
        config_path = config_path or os.path.join(_CONFIG_DIR, "config.yaml")

        try:
            with open(config_path, "r") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            logger.warning("Config file not found: %s, using built-in profiles", config_path)
            data = {}
        except yaml.YAMLError as e:
            logger.warning("Config file %s is not valid YAML (%s), using built-in profiles",
                           config_path, e)
            data = {}
        else:
            logger.info("Loaded config from %s", config_path)

        if data is None:
            data = {}
        if not isinstance(data, dict):
            logger.warning("Config root should be a mapping, got %s; ignoring it",
                           type(data).__name__)
            data = {}

        self._data = data
        for problem in self.validate():
            logger.warning("Config validation: %s", problem)
        return self

    def validate(self) -> list:
        """List schema problems in the loaded data; empty when it looks sane."""
        problems = []
        for section_name, fields in _CONFIG_SCHEMA.items():
            section = self._data.get(section_name)
            if section is None:
                continue
            if not isinstance(section, dict):
                problems.append(f"Section '{section_name}' should be a mapping, "
                                f"got {type(section).__name__}")
                continue
            for key, expected in fields.items():
                if key in section and not isinstance(section[key], expected):
                    value = section[key]
                    problems.append(f"{section_name}.{key}: expected {_type_name(expected)}, "
                                    f"got {type(value).__name__} ({value!r})")

        profiles = self._data.get("profiles")
        if profiles is not None and not isinstance(profiles, dict):
            problems.append(f"Section 'profiles' should be a mapping, got {type(profiles).__name__}")
        elif profiles:
            for name, overrides in profiles.items():
                if not isinstance(overrides, dict):
                    problems.append(f"profiles.{name} should be a mapping")
                    continue
                base = overrides.get("base", name)
                if base not in BUILTIN_PROFILES:
                    problems.append(f"profiles.{name}: no built-in profile '{base}' to derive from")
                for section_name in _PROFILE_SECTIONS:
                    if section_name in overrides and not isinstance(overrides[section_name], dict):
                        problems.append(f"profiles.{name}.{section_name} should be a mapping")
        return problems

    def get(self, key_path: str, default=None):
        """Nested lookup with dot notation, e.g. ``get("logging.level")``."""
        node = self._data
        for key in key_path.split("."):
            if not isinstance(node, dict) or key not in node:
                return default
            node = node[key]
        return node

    def get_section(self, section: str) -> dict:
        value = self._data.get(section)
        return value if isinstance(value, dict) else {}

    @property
    def session(self) -> dict:
        return self.get_section("session")

    @property
    def log_settings(self) -> dict:
        return self.get_section("logging")

    @property
    def profiles(self) -> dict:
        return self.get_section("profiles")

    @property
    def profile_name(self) -> str:
        return self.session.get("profile") or DEFAULT_PROFILE

    def profile_names(self) -> list:
        """Built-in profiles plus every profile defined in the file."""
        return sorted(set(BUILTIN_PROFILES) | set(self.profiles))

    def get_profile(self, name: str = None) -> GestureProfile:
        """Build a GestureProfile, merging YAML overrides onto a built-in one.

        A YAML profile may name its ``base`` built-in; otherwise the profile
        name itself must be built-in.

        Raises:
            ValueError: unknown profile or base, or invalid threshold values
        """
        name = name or self.profile_name
        overrides = self.profiles.get(name) or {}
        if not isinstance(overrides, dict):
            raise ValueError(f"Profile '{name}' must be a mapping of overrides")
        overrides = dict(overrides)
        base_name = overrides.pop("base", name)

        merged = _deep_merge(builtin_profile(base_name).to_dict(), overrides)
        merged["name"] = name
        profile = GestureProfile.from_dict(merged)
        logger.debug("Profile '%s' built from '%s' with overrides %s",
                     name, base_name, sorted(overrides) or "none")
        return profile

    @classmethod
    def reset(cls):
        """Forget the singleton and its data (for tests)."""
        cls._instance = None
        cls._data = {}
