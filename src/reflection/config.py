from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

DEFAULT_MAX_UNWRAP_DEPTH = 64


@dataclass(frozen=True)
class ReflectionConfig:
    """Bounds applied while walking pointer and interface chains."""

    max_unwrap_depth: int = DEFAULT_MAX_UNWRAP_DEPTH

    def __post_init__(self) -> None:
        if isinstance(self.max_unwrap_depth, bool) or not isinstance(self.max_unwrap_depth, int):
            raise ValueError(f"max_unwrap_depth must be an int, got {type(self.max_unwrap_depth).__name__}")
        if self.max_unwrap_depth < 1:
            raise ValueError(f"max_unwrap_depth must be positive, got {self.max_unwrap_depth}")


DEFAULT_CONFIG = ReflectionConfig()


def parse_reflection_config(config: Mapping[str, Any]) -> ReflectionConfig:
    """Build a ReflectionConfig from a plain mapping.

    Accepts either spelling of the key:
    {"maxUnwrapDepth": 16} or {"max_unwrap_depth": 16}
    Missing keys fall back to the defaults.
    """
    depth = config.get("maxUnwrapDepth", config.get("max_unwrap_depth", DEFAULT_MAX_UNWRAP_DEPTH))
    return ReflectionConfig(max_unwrap_depth=depth)
