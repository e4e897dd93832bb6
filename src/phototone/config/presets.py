"""Preset library for phototone.

Provides the built-in looks, the NamedPreset snapshot type and conversion
to and from the persisted preset record shape. Storing preset collections
is left to the caller.
"""

from __future__ import annotations

import logging
import secrets
import string
import time
from dataclasses import dataclass, field

from phototone.config.values import ControlValues

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.digits + string.ascii_lowercase


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def generate_preset_id() -> str:
    """Generate a unique id for a custom preset (``custom-<ms>-<9 chars>``)."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"custom-{now_ms()}-{suffix}"


@dataclass
class NamedPreset:
    """A named snapshot of a control vector.

    The vector is copied on construction, so later edits to the caller's
    ControlValues never alter a saved preset.
    """

    id: str
    name: str
    icon: str
    description: str
    values: ControlValues = field(default_factory=ControlValues)
    created_at: int = 0
    updated_at: int = 0
    is_custom: bool = False

    def __post_init__(self):
        if not isinstance(self.values, ControlValues):
            raise TypeError(f"Expected ControlValues, got {type(self.values).__name__}")
        self.values = self.values.copy()


def create_preset(
    name: str,
    icon: str,
    description: str,
    values: ControlValues,
) -> NamedPreset:
    """Create a custom preset from the current control vector.

    :param name: Display name
    :param icon: Icon (usually an emoji)
    :param description: Short description
    :param values: Control vector to snapshot
    :returns: NamedPreset with a fresh id and timestamps
    """
    timestamp = now_ms()
    return NamedPreset(
        id=generate_preset_id(),
        name=name,
        icon=icon,
        description=description,
        values=values,
        created_at=timestamp,
        updated_at=timestamp,
        is_custom=True,
    )


# ============================================================================
# Built-in looks
# ============================================================================

ORIGINAL = NamedPreset("original", "Original", "📷", "Unedited photo")

VIVID = NamedPreset(
    "vivid",
    "Vivid",
    "🌈",
    "Bright, lively colors",
    ControlValues(exposure=5, contrast=15, vibrance=35, saturation=20, clarity=10),
)

WARM = NamedPreset(
    "warm",
    "Warm",
    "🌅",
    "Warm sunset tones",
    ControlValues(
        exposure=5,
        temperature=40,
        tint=10,
        vibrance=15,
        saturation=10,
        highlights=-10,
        shadows=15,
    ),
)

COOL = NamedPreset(
    "cool",
    "Cool",
    "❄️",
    "Cool, crisp tones",
    ControlValues(temperature=-35, tint=-5, contrast=10, vibrance=10, highlights=5, clarity=5),
)

VINTAGE = NamedPreset(
    "vintage",
    "Vintage",
    "📻",
    "Nostalgic faded film",
    ControlValues(
        exposure=5,
        contrast=-10,
        saturation=-25,
        temperature=15,
        fade=30,
        grain=20,
        vignette=-25,
    ),
)

DRAMATIC = NamedPreset(
    "dramatic",
    "Dramatic",
    "🎭",
    "High contrast, strong impact",
    ControlValues(
        exposure=-5,
        contrast=45,
        highlights=-20,
        shadows=25,
        clarity=30,
        vibrance=15,
        vignette=-30,
    ),
)

SOFT = NamedPreset(
    "soft",
    "Soft",
    "🌸",
    "Soft and dreamy",
    ControlValues(
        exposure=10,
        contrast=-20,
        highlights=-15,
        shadows=20,
        saturation=-15,
        clarity=-20,
        fade=15,
    ),
)

BW = NamedPreset(
    "bw",
    "B&W",
    "🖤",
    "Classic black and white",
    ControlValues(saturation=-100, contrast=25, clarity=15, grain=10),
)

CINEMATIC = NamedPreset(
    "cinematic",
    "Cinema",
    "🎬",
    "Film look",
    ControlValues(
        contrast=20,
        temperature=-10,
        tint=5,
        highlights=-15,
        shadows=10,
        saturation=-10,
        fade=10,
        vignette=-35,
    ),
)

PORTRAIT = NamedPreset(
    "portrait",
    "Portrait",
    "👤",
    "Tuned for portraits",
    ControlValues(
        exposure=5,
        contrast=5,
        highlights=-10,
        shadows=15,
        temperature=10,
        vibrance=10,
        clarity=-10,
        sharpness=20,
    ),
)

LANDSCAPE = NamedPreset(
    "landscape",
    "Landscape",
    "🏔️",
    "Tuned for landscapes",
    ControlValues(
        exposure=5,
        contrast=15,
        highlights=-20,
        shadows=30,
        vibrance=25,
        clarity=25,
        sharpness=15,
    ),
)

MOODY = NamedPreset(
    "moody",
    "Moody",
    "🌙",
    "Dark and mysterious",
    ControlValues(
        exposure=-15,
        contrast=20,
        highlights=-30,
        shadows=-10,
        temperature=-15,
        saturation=-20,
        clarity=15,
        vignette=-40,
    ),
)

BUILTIN_PRESETS: dict[str, NamedPreset] = {
    preset.id: preset
    for preset in (
        ORIGINAL,
        VIVID,
        WARM,
        COOL,
        VINTAGE,
        DRAMATIC,
        SOFT,
        BW,
        CINEMATIC,
        PORTRAIT,
        LANDSCAPE,
        MOODY,
    )
}


def get_preset(preset_id: str) -> NamedPreset:
    """Get a built-in preset by id.

    Returns a copy, so the caller may edit its values freely.

    :param preset_id: Preset id (case-insensitive)
    :returns: NamedPreset
    :raises KeyError: If preset not found
    """
    key = preset_id.lower()
    if key not in BUILTIN_PRESETS:
        available = ", ".join(BUILTIN_PRESETS.keys())
        raise KeyError(f"Unknown preset '{preset_id}'. Available: {available}")
    preset = BUILTIN_PRESETS[key]
    return NamedPreset(preset.id, preset.name, preset.icon, preset.description, preset.values)


# ============================================================================
# Record conversion
# ============================================================================

_RECORD_FIELDS = ("id", "name", "icon", "description", "filters", "createdAt", "updatedAt")


def preset_to_dict(preset: NamedPreset) -> dict:
    """Convert a preset to its persisted record shape.

    :param preset: NamedPreset instance
    :returns: ``{id, name, icon, description, filters, createdAt, updatedAt}``
    """
    return {
        "id": preset.id,
        "name": preset.name,
        "icon": preset.icon,
        "description": preset.description,
        "filters": preset.values.to_dict(),
        "createdAt": preset.created_at,
        "updatedAt": preset.updated_at,
    }


def validate_preset_record(record: object) -> bool:
    """Check that a record has the persisted preset shape.

    :param record: Decoded record (e.g., from JSON)
    :returns: True if all fields are present with the right types
    """
    if not isinstance(record, dict):
        return False
    if any(key not in record for key in _RECORD_FIELDS):
        return False
    return (
        isinstance(record["id"], str)
        and isinstance(record["name"], str)
        and isinstance(record["icon"], str)
        and isinstance(record["description"], str)
        and isinstance(record["filters"], dict)
        and isinstance(record["createdAt"], int)
        and isinstance(record["updatedAt"], int)
    )


def preset_from_dict(record: dict) -> NamedPreset:
    """Create a NamedPreset from a persisted record.

    Filter values are clamped into range.

    :param record: Record with the :func:`preset_to_dict` shape
    :returns: NamedPreset instance
    :raises ValueError: If the record shape is invalid
    """
    if not validate_preset_record(record):
        raise ValueError(f"Invalid preset record: {record!r}")
    return NamedPreset(
        id=record["id"],
        name=record["name"],
        icon=record["icon"],
        description=record["description"],
        values=ControlValues.from_dict(record["filters"]).clamp(),
        created_at=record["createdAt"],
        updated_at=record["updatedAt"],
        is_custom=record["id"].startswith("custom-"),
    )
