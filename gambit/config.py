from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional


ENV_PREFIX = "GAMBIT_"


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the server and the computer opponent.

    Attributes:
        search_depth (int): Default search depth for the opponent.
        search_seed (Optional[int]): Seed for move-order shuffling; ``None``
            draws from system randomness.
        log_level (str): Root logging level name.
        host (str): Interface the HTTP server binds to.
        port (int): Port the HTTP server listens on.
    """

    search_depth: int = 3
    search_seed: Optional[int] = None
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    def __post_init__(self) -> None:
        if self.search_depth < 1:
            raise ValueError("search_depth must be >= 1")
        if not (0 < self.port < 65536):
            raise ValueError("port must be in 1..65535")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``GAMBIT_*`` environment variables.

        Raises:
            ValueError: If a numeric variable does not parse or is out of range.
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        seed = env.get(ENV_PREFIX + "SEARCH_SEED")
        return cls(
            search_depth=_int(env, "SEARCH_DEPTH", defaults.search_depth),
            search_seed=_int(env, "SEARCH_SEED", 0) if seed not in (None, "") else None,
            log_level=env.get(ENV_PREFIX + "LOG_LEVEL", defaults.log_level).upper(),
            host=env.get(ENV_PREFIX + "HOST", defaults.host),
            port=_int(env, "PORT", defaults.port),
        )


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from e
