"""
Learning configuration.

Environment-first, like the path helpers: ``LearningConfig.from_env()``
reads MATCHBOX_* variables, and CLI flags override them.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from enum import Enum
from typing import Mapping, Optional


class ExhaustionPolicy(Enum):
    # Rebuild a full pool from the legal moves (drops learning for that position)
    REFILL = "refill"
    # Raise MoveExhausted; the game ends as EXHAUSTED
    REPORT = "report"


_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _parse_bool(name: str, raw: str) -> bool:
    v = raw.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


@dataclass(frozen=True)
class LearningConfig:
    reinforce_both_players: bool = False
    exhaustion: ExhaustionPolicy = ExhaustionPolicy.REFILL
    dedup: bool = True
    seed: Optional[int] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LearningConfig":
        env = os.environ if environ is None else environ
        cfg = cls()
        raw = env.get("MATCHBOX_REINFORCE_BOTH")
        if raw:
            cfg = replace(cfg, reinforce_both_players=_parse_bool("MATCHBOX_REINFORCE_BOTH", raw))
        raw = env.get("MATCHBOX_EXHAUSTION")
        if raw:
            try:
                cfg = replace(cfg, exhaustion=ExhaustionPolicy(raw.strip().lower()))
            except ValueError:
                raise ValueError(f"MATCHBOX_EXHAUSTION must be refill or report, got {raw!r}") from None
        raw = env.get("MATCHBOX_DEDUP")
        if raw:
            cfg = replace(cfg, dedup=_parse_bool("MATCHBOX_DEDUP", raw))
        raw = env.get("MATCHBOX_SEED")
        if raw:
            try:
                cfg = replace(cfg, seed=int(raw))
            except ValueError:
                raise ValueError(f"MATCHBOX_SEED must be an integer, got {raw!r}") from None
        return cfg
