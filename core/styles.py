from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from core.schemas import StyleEnum

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelProfile:
    model: str
    num_steps: int
    guidance: Optional[float] = None
    strength: Optional[float] = None

    def params(self, prompt: str) -> Dict[str, Any]:
        """Request body for the model; optional knobs are left out when unset."""
        params: Dict[str, Any] = {"prompt": prompt, "num_steps": self.num_steps}
        if self.guidance is not None:
            params["guidance"] = self.guidance
        if self.strength is not None:
            params["strength"] = self.strength
        return params


DEFAULT_STYLE = StyleEnum.stable_diffusion

STYLE_PROFILES: Dict[StyleEnum, ModelProfile] = {
    StyleEnum.stable_diffusion: ModelProfile(
        "@cf/stabilityai/stable-diffusion-xl-base-1.0", num_steps=20, guidance=7.5, strength=1
    ),
    StyleEnum.flux: ModelProfile("@cf/black-forest-labs/flux-1-schnell", num_steps=4),
    StyleEnum.dreamshaper: ModelProfile("@cf/lykon/dreamshaper-8-lcm", num_steps=8, guidance=7.5),
    StyleEnum.realistic: ModelProfile("@cf/bytedance/stable-diffusion-xl-lightning", num_steps=8),
}


def resolve_style(style: str | None) -> StyleEnum:
    """Unknown or missing keywords fall back to the default style."""
    try:
        return StyleEnum(style)
    except ValueError:
        logger.warning("Unknown style %r, falling back to %s", style, DEFAULT_STYLE.value)
        return DEFAULT_STYLE
