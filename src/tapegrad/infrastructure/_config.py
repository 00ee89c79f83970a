"""
Runtime configuration for tapegrad storage backends.

`TapegradConfig` gathers the knobs a storage backend reads at construction
time. Values can be given explicitly or pulled from the environment with
`TapegradConfig.from_env`:

- ``TAPEGRAD_DEFAULT_DTYPE``      : dtype name used by factories (``float32``)
- ``TAPEGRAD_MAX_ALLOC_ELEMENTS`` : upper bound on a single allocation
- ``TAPEGRAD_SEED``               : seed of the backend's random generator
- ``TAPEGRAD_LOG_LEVEL``          : level of the ``"tapegrad"`` logger
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from ..domain._dtype import Dtype, float32


def _optional_int(env: Mapping[str, str], key: str) -> Optional[int]:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from e


@dataclass(frozen=True)
class TapegradConfig:
    """
    Storage backend configuration.

    Parameters
    ----------
    default_dtype : Dtype, optional
        Dtype used when a factory is called without one. Defaults to float32.
    max_alloc_elements : Optional[int], optional
        If set, any allocation of more elements fails with
        `DeviceAllocationError`. None means unbounded.
    seed : Optional[int], optional
        Seed of the backend's random generator. None draws fresh entropy.
    log_level : Optional[str], optional
        If set, applied to the package logger when a backend is created.
    """

    default_dtype: Dtype = float32
    max_alloc_elements: Optional[int] = None
    seed: Optional[int] = None
    log_level: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "default_dtype", Dtype.of(self.default_dtype))
        if self.max_alloc_elements is not None and self.max_alloc_elements < 0:
            raise ValueError(
                f"max_alloc_elements must be >= 0, got {self.max_alloc_elements}"
            )

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "TapegradConfig":
        """Build a config from ``env`` (defaults to ``os.environ``)."""
        env = os.environ if env is None else env
        return cls(
            default_dtype=Dtype.of(env.get("TAPEGRAD_DEFAULT_DTYPE", "float32")),
            max_alloc_elements=_optional_int(env, "TAPEGRAD_MAX_ALLOC_ELEMENTS"),
            seed=_optional_int(env, "TAPEGRAD_SEED"),
            log_level=env.get("TAPEGRAD_LOG_LEVEL") or None,
        )

    def with_overrides(self, **overrides) -> "TapegradConfig":
        """Copy with every non-None keyword replaced."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
