"""Import Lightroom presets (.xmp, .lrtemplate) as control vectors.

Import is all-or-nothing: a document either yields a complete NamedPreset
or raises a :class:`phototone.errors.PresetImportError` subclass. Values are
mapped onto the phototone slider ranges and clamped, never rejected.

Example:
    >>> from phototone.presets import import_preset_file
    >>>
    >>> names = {"Vivid", "Warm"}
    >>> preset = import_preset_file("presets/sunset.xmp", existing_names=names)
    >>> preset.name, preset.values.exposure
    ('sunset', 20.0)
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as ET

from phototone.config.presets import NamedPreset, create_preset
from phototone.config.values import ControlValues
from phototone.errors import InvalidDocumentError, NoRecognizedFieldsError, UnsupportedFormatError

logger = logging.getLogger(__name__)

PresetFormat = Literal["xmp", "lrtemplate"]

DEFAULT_ICON = "📥"
DEFAULT_DESCRIPTION = "Imported from Lightroom"

_NUMBER_PREFIX = re.compile(r"\s*[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_LRTEMPLATE_ENTRY = re.compile(r"([A-Za-z0-9_]+)\s*=\s*([-+]?\d*\.?\d+)")


# ============================================================================
# Parsing
# ============================================================================


def normalize_key(key: str) -> str:
    """Strip an XML namespace (``{uri}Name``) and the ``crs:`` prefix."""
    if key.startswith("{"):
        key = key.rpartition("}")[2]
    if key.startswith("crs:"):
        key = key[4:]
    return key


def parse_number(text: str | None) -> float | None:
    """Parse the leading number of text, ignoring trailing garbage.

    Returns None when there is no numeric prefix or the result is not finite.
    """
    if text is None:
        return None
    match = _NUMBER_PREFIX.match(text)
    if match is None:
        return None
    value = float(match.group())
    return value if math.isfinite(value) else None


def parse_xmp_preset(text: str) -> dict[str, float]:
    """Extract numeric settings from an XMP document.

    Attributes of every element are flattened into one mapping; the
    element form (``<crs:Exposure2012>1.0</crs:Exposure2012>``) is read
    as well. Later occurrences of a key overwrite earlier ones.

    :param text: XMP document
    :returns: Raw settings keyed by their local name
    :raises InvalidDocumentError: If the document is not well-formed XML
    """
    try:
        root = ET.fromstring(text.lstrip("\ufeff").strip())
    except (ET.ParseError, DefusedXmlException) as exc:
        raise InvalidDocumentError(f"Invalid XMP XML: {exc}") from exc

    raw: dict[str, float] = {}
    for element in root.iter():
        for name, attr_value in element.attrib.items():
            value = parse_number(attr_value)
            if value is not None:
                raw[normalize_key(name)] = value
        if len(element) == 0 and isinstance(element.tag, str):
            value = parse_number(element.text)
            if value is not None:
                raw[normalize_key(element.tag)] = value
    return raw


def parse_lrtemplate_preset(text: str) -> dict[str, float]:
    """Extract ``Name = number`` settings from a Lua-style .lrtemplate."""
    raw: dict[str, float] = {}
    for match in _LRTEMPLATE_ENTRY.finditer(text):
        value = parse_number(match.group(2))
        if value is not None:
            raw[normalize_key(match.group(1))] = value
    return raw


# ============================================================================
# Mapping
# ============================================================================


def _clamp(value: float, min_value: float, max_value: float) -> float:
    return min(max_value, max(min_value, value))


def map_exposure(value: float) -> float:
    """Lightroom stops (-5..+5) to -100..100."""
    return _clamp(value * 20.0, -100.0, 100.0)


def map_temperature(value: float) -> float:
    """Kelvin to -100..100, centered on 5000K."""
    return _clamp((value - 5000.0) / 200.0, -100.0, 100.0)


def map_signed(value: float) -> float:
    return _clamp(value, -100.0, 100.0)


def map_unsigned(value: float) -> float:
    return _clamp(value, 0.0, 100.0)


@dataclass(frozen=True)
class LightroomField:
    """One control and the Lightroom keys it is read from (first match wins)."""

    control: str
    aliases: tuple[str, ...]
    mapper: Callable[[float], float] = map_signed

    def pick(self, raw: Mapping[str, float]) -> tuple[str, float] | None:
        for alias in self.aliases:
            if alias in raw:
                return alias, raw[alias]
        return None


_BAND_ALIASES = (
    ("red", ("Red",)),
    ("orange", ("Orange",)),
    ("yellow", ("Yellow",)),
    ("green", ("Green",)),
    ("cyan", ("Aqua", "Cyan")),
    ("blue", ("Blue",)),
    ("purple", ("Purple",)),
    ("magenta", ("Magenta",)),
)

LIGHTROOM_FIELDS: tuple[LightroomField, ...] = (
    LightroomField("exposure", ("Exposure2012", "Exposure"), map_exposure),
    LightroomField("contrast", ("Contrast2012", "Contrast")),
    LightroomField("highlights", ("Highlights2012", "Highlights")),
    LightroomField("shadows", ("Shadows2012", "Shadows")),
    LightroomField("whites", ("Whites2012", "Whites")),
    LightroomField("blacks", ("Blacks2012", "Blacks")),
    LightroomField("temperature", ("Temperature",), map_temperature),
    LightroomField("tint", ("Tint",)),
    LightroomField("vibrance", ("Vibrance",)),
    LightroomField("saturation", ("Saturation",)),
    LightroomField("clarity", ("Clarity2012", "Clarity")),
    LightroomField("sharpness", ("Sharpness",), map_unsigned),
    LightroomField("grain", ("GrainAmount",), map_unsigned),
    LightroomField("vignette", ("PostCropVignetteAmount",)),
    *(
        LightroomField(f"hue_{band}", tuple(f"HueAdjustment{alias}" for alias in aliases))
        for band, aliases in _BAND_ALIASES
    ),
    *(
        LightroomField(f"sat_{band}", tuple(f"SaturationAdjustment{alias}" for alias in aliases))
        for band, aliases in _BAND_ALIASES
    ),
)


@dataclass
class LightroomMapping:
    """Result of mapping raw Lightroom settings.

    Attributes:
        values: Control vector; controls without a Lightroom key stay neutral
        applied_count: Number of controls set from the document
        applied_keys: Control name to the Lightroom key it was read from
    """

    values: ControlValues
    applied_count: int = 0
    applied_keys: dict[str, str] = field(default_factory=dict)


def map_lightroom_values(raw: Mapping[str, float]) -> LightroomMapping:
    """Map raw Lightroom settings onto a control vector.

    :param raw: Settings from :func:`parse_xmp_preset` or :func:`parse_lrtemplate_preset`
    :returns: LightroomMapping with the mapped vector
    :raises NoRecognizedFieldsError: If no key maps to a control
    """
    values = ControlValues()
    applied_keys: dict[str, str] = {}
    for lr_field in LIGHTROOM_FIELDS:
        picked = lr_field.pick(raw)
        if picked is None:
            continue
        key, value = picked
        setattr(values, lr_field.control, lr_field.mapper(value))
        applied_keys[lr_field.control] = key

    if not applied_keys:
        raise NoRecognizedFieldsError(len(raw))

    logger.debug("Mapped %d of %d Lightroom settings", len(applied_keys), len(raw))
    return LightroomMapping(values, len(applied_keys), applied_keys)


# ============================================================================
# Import
# ============================================================================

_PARSERS: dict[str, Callable[[str], dict[str, float]]] = {
    "xmp": parse_xmp_preset,
    "lrtemplate": parse_lrtemplate_preset,
}


def detect_format(file_name: str) -> PresetFormat:
    """Return the preset format from the file extension (case-insensitive).

    :raises UnsupportedFormatError: For any other extension
    """
    _, dot, extension = file_name.rpartition(".")
    extension = extension.lower()
    if not dot or extension not in _PARSERS:
        raise UnsupportedFormatError(file_name)
    return extension  # type: ignore[return-value]


def base_name(file_name: str) -> str:
    """Strip the last extension; names starting with their only dot are kept."""
    index = file_name.rfind(".")
    if index <= 0:
        return file_name
    return file_name[:index]


def make_unique_name(base: str, existing: Iterable[str] | None = None) -> str:
    """Return base, or ``base (2)``, ``base (3)``, ... if already taken.

    existing is not modified.
    """
    if not existing:
        return base
    taken = set(existing)
    name = base
    counter = 2
    while name in taken:
        name = f"{base} ({counter})"
        counter += 1
    return name


def import_preset(
    file_name: str,
    text: str,
    *,
    existing_names: set[str] | None = None,
    icon: str = DEFAULT_ICON,
    description: str = DEFAULT_DESCRIPTION,
) -> NamedPreset:
    """Import a Lightroom preset document.

    :param file_name: Original file name; selects the format and the preset name
    :param text: Document contents
    :param existing_names: Names already in use; the new name is added on success
    :param icon: Icon for the created preset
    :param description: Description for the created preset
    :returns: New custom NamedPreset
    :raises UnsupportedFormatError: If the extension is not .xmp or .lrtemplate
    :raises InvalidDocumentError: If an XMP document is not well-formed
    :raises NoRecognizedFieldsError: If no supported setting was found
    """
    preset_format = detect_format(file_name)
    raw = _PARSERS[preset_format](text)
    mapping = map_lightroom_values(raw)

    name = make_unique_name(base_name(file_name), existing_names)
    preset = create_preset(name, icon, description, mapping.values)
    if existing_names is not None:
        existing_names.add(name)

    logger.info(
        "Imported %s preset %r (%d settings)", preset_format, name, mapping.applied_count
    )
    return preset


def import_preset_file(path: str | Path, **kwargs) -> NamedPreset:
    """Read a preset file (UTF-8) and import it. See :func:`import_preset`."""
    path = Path(path)
    return import_preset(path.name, path.read_text(encoding="utf-8"), **kwargs)
