"""Built-in filter presets.

Each preset pairs one or two tinted overlays with a color adjustment, after
the look of the Instagram filter of the same name. Users can add or
override presets through the TOML config (see ``instafilter.config``).
"""

from __future__ import annotations

import logging

from instafilter.components.filter_spec import ColorMatrixStep, CompositeStep, FilterSpec

logger = logging.getLogger(__name__)


def _overlay(mode: str, color: list[int], opacity: float = 1.0) -> CompositeStep:
    return CompositeStep(blend_mode=mode, overlay_spec={"color": color}, opacity=opacity)


BUILTIN_PRESETS: dict[str, FilterSpec] = {
    spec.name: spec
    for spec in (
        FilterSpec(
            name="clarendon",
            steps=[
                _overlay("overlay", [127, 187, 227], 0.2),
                ColorMatrixStep(contrast=20, saturation=35),
            ],
        ),
        FilterSpec(
            name="gingham",
            steps=[
                _overlay("softLight", [230, 230, 250]),
                ColorMatrixStep(brightness=5, hue_degrees=350),
            ],
        ),
        FilterSpec(
            name="moon",
            steps=[
                _overlay("softLight", [160, 160, 160]),
                _overlay("lighten", [56, 56, 56]),
                ColorMatrixStep(brightness=10, contrast=10, saturation=-100),
            ],
        ),
        FilterSpec(
            name="lark",
            steps=[
                _overlay("colorDodge", [34, 37, 63]),
                _overlay("darken", [242, 242, 242], 0.8),
                ColorMatrixStep(contrast=-10),
            ],
        ),
        FilterSpec(
            name="reyes",
            steps=[
                _overlay("softLight", [239, 205, 173], 0.5),
                ColorMatrixStep(brightness=10, contrast=-15, saturation=-25),
            ],
        ),
        FilterSpec(
            name="nashville",
            steps=[
                _overlay("darken", [247, 176, 153], 0.56),
                _overlay("lighten", [0, 70, 150], 0.4),
                ColorMatrixStep(brightness=5, contrast=20, saturation=20),
            ],
        ),
        FilterSpec(
            name="toaster",
            steps=[
                _overlay("screen", [128, 78, 15]),
                ColorMatrixStep(brightness=-10, contrast=50),
            ],
        ),
        FilterSpec(
            name="willow",
            steps=[
                _overlay("overlay", [212, 169, 175]),
                ColorMatrixStep(brightness=-10, contrast=-5, saturation=-50),
            ],
        ),
    )
}


def load_presets(config_path: str | None = None) -> dict[str, FilterSpec]:
    """Return built-in presets merged with presets from the config file.

    Config presets replace built-ins of the same name.
    """
    from instafilter.config import load_config_presets

    presets = dict(BUILTIN_PRESETS)
    user_presets = load_config_presets(config_path)
    if user_presets:
        logger.debug("Loaded %d preset(s) from config: %s", len(user_presets), sorted(user_presets))
    presets.update(user_presets)
    return presets


def get_preset(name: str, config_path: str | None = None) -> FilterSpec:
    """Look up a preset by name.

    Raises:
        KeyError: If no preset has that name
    """
    presets = load_presets(config_path)
    try:
        return presets[name]
    except KeyError:
        raise KeyError(
            f"Unknown preset {name!r}; available: {', '.join(sorted(presets))}"
        ) from None
