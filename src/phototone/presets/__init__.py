"""Preset ingestion from external editors."""

from phototone.presets.lightroom import (
    LIGHTROOM_FIELDS,
    LightroomField,
    LightroomMapping,
    detect_format,
    import_preset,
    import_preset_file,
    make_unique_name,
    map_lightroom_values,
    parse_lrtemplate_preset,
    parse_xmp_preset,
)

__all__ = [
    "LIGHTROOM_FIELDS",
    "LightroomField",
    "LightroomMapping",
    "detect_format",
    "import_preset",
    "import_preset_file",
    "make_unique_name",
    "map_lightroom_values",
    "parse_lrtemplate_preset",
    "parse_xmp_preset",
]
