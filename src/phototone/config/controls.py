"""Control vector configuration.

This module defines the standardized specifications for all 35 controls
of the control vector. Ranges and neutral values used by the compiler,
the importer and the value dataclass all come from here.
"""

from __future__ import annotations

from dataclasses import dataclass, fields

from phototone.config.operations import ControlGroup, ControlSpec

# Order matches the HSL panel and the pipeline's per-band stage order.
HUE_BAND_NAMES = ("red", "orange", "yellow", "green", "cyan", "blue", "purple", "magenta")


def _signed(
    name: str, group: ControlGroup, label: str, description: str, limit: float = 100.0
) -> ControlSpec:
    return ControlSpec(
        name=name,
        min_value=-limit,
        max_value=limit,
        default=0.0,
        neutral=0.0,
        group=group,
        label=label,
        description=description,
    )


def _unsigned(name: str, label: str, description: str) -> ControlSpec:
    return ControlSpec(
        name=name,
        min_value=0.0,
        max_value=100.0,
        default=0.0,
        neutral=0.0,
        group="effects",
        label=label,
        description=description,
    )


@dataclass(frozen=True)
class ControlConfig:
    """Configuration for every control of the adjustment pipeline.

    Field order is the display order of the editing panel.
    """

    # Light
    exposure: ControlSpec = _signed("exposure", "light", "Exposure", "Overall exposure")
    brightness: ControlSpec = _signed("brightness", "light", "Brightness", "Linear brightness")
    contrast: ControlSpec = _signed("contrast", "light", "Contrast", "Linear contrast")
    highlights: ControlSpec = _signed("highlights", "light", "Highlights", "Bright tones")
    shadows: ControlSpec = _signed("shadows", "light", "Shadows", "Dark tones")
    whites: ControlSpec = _signed("whites", "light", "Whites", "White point")
    blacks: ControlSpec = _signed("blacks", "light", "Blacks", "Black point, positive fades")

    # Color
    temperature: ControlSpec = _signed(
        "temperature", "color", "Temperature", "-100=cool/blue, 100=warm/orange"
    )
    tint: ControlSpec = _signed("tint", "color", "Tint", "-100=green, 100=magenta")
    vibrance: ControlSpec = _signed("vibrance", "color", "Vibrance", "Smart saturation")
    saturation: ControlSpec = _signed("saturation", "color", "Saturation", "Global saturation")
    hue: ControlSpec = _signed("hue", "color", "Hue", "Hue rotation in degrees", limit=180.0)

    # HSL - hue shift per band
    hue_red: ControlSpec = _signed("hue_red", "hsl_hue", "Red", "Red hue shift")
    hue_orange: ControlSpec = _signed("hue_orange", "hsl_hue", "Orange", "Orange hue shift")
    hue_yellow: ControlSpec = _signed("hue_yellow", "hsl_hue", "Yellow", "Yellow hue shift")
    hue_green: ControlSpec = _signed("hue_green", "hsl_hue", "Green", "Green hue shift")
    hue_cyan: ControlSpec = _signed("hue_cyan", "hsl_hue", "Cyan", "Cyan hue shift")
    hue_blue: ControlSpec = _signed("hue_blue", "hsl_hue", "Blue", "Blue hue shift")
    hue_purple: ControlSpec = _signed("hue_purple", "hsl_hue", "Purple", "Purple hue shift")
    hue_magenta: ControlSpec = _signed("hue_magenta", "hsl_hue", "Magenta", "Magenta hue shift")

    # HSL - saturation per band
    sat_red: ControlSpec = _signed("sat_red", "hsl_sat", "Red", "Red saturation")
    sat_orange: ControlSpec = _signed("sat_orange", "hsl_sat", "Orange", "Orange saturation")
    sat_yellow: ControlSpec = _signed("sat_yellow", "hsl_sat", "Yellow", "Yellow saturation")
    sat_green: ControlSpec = _signed("sat_green", "hsl_sat", "Green", "Green saturation")
    sat_cyan: ControlSpec = _signed("sat_cyan", "hsl_sat", "Cyan", "Cyan saturation")
    sat_blue: ControlSpec = _signed("sat_blue", "hsl_sat", "Blue", "Blue saturation")
    sat_purple: ControlSpec = _signed("sat_purple", "hsl_sat", "Purple", "Purple saturation")
    sat_magenta: ControlSpec = _signed("sat_magenta", "hsl_sat", "Magenta", "Magenta saturation")

    # Effects
    clarity: ControlSpec = _signed("clarity", "effects", "Clarity", "Local contrast proxy")
    sharpness: ControlSpec = _unsigned("sharpness", "Sharpness", "3x3 sharpen kernel")
    blur: ControlSpec = _unsigned("blur", "Blur", "Box blur")
    vignette: ControlSpec = _signed(
        "vignette", "effects", "Vignette", "Edge darkening, drawn by the overlay renderer"
    )
    noise: ControlSpec = _unsigned("noise", "Noise", "Harsh monochrome noise")
    grain: ControlSpec = _unsigned("grain", "Grain", "Soft film grain")
    fade: ControlSpec = _unsigned("fade", "Fade", "Black point lift")

    def get_spec(self, name: str) -> ControlSpec:
        """Get control spec by name.

        :param name: Control name
        :return: ControlSpec for the control
        :raises KeyError: If the control does not exist
        """
        spec = getattr(self, name, None)
        if not isinstance(spec, ControlSpec):
            raise KeyError(f"Unknown control '{name}'")
        return spec

    def get_all_specs(self) -> dict[str, ControlSpec]:
        """Get all control specs as an ordered dictionary.

        :return: Dictionary mapping control names to specs
        """
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def names(self) -> tuple[str, ...]:
        """Return all control names in panel order."""
        return tuple(f.name for f in fields(self))

    def group(self, group: ControlGroup) -> tuple[ControlSpec, ...]:
        """Return the specs belonging to a UI group, in panel order."""
        return tuple(spec for spec in self.get_all_specs().values() if spec.group == group)


# Singleton instance for use throughout the codebase
CONTROL_CONFIG = ControlConfig()

CONTROL_GROUPS: dict[ControlGroup, str] = {
    "light": "Light",
    "color": "Color",
    "hsl_hue": "HSL - Hue",
    "hsl_sat": "HSL - Saturation",
    "effects": "Effects",
}
