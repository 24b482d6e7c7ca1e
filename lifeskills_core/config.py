from __future__ import annotations
import os, json, pathlib, random


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


MIN_ANSWER: int = 1
MAX_ANSWER: int = 4
ANSWER_LABELS: dict[int, str] = {1: "Never", 2: "A little", 3: "Regularly", 4: "A lot"}

ADVANCE_DELAY_MS: int = 300

DEBUG_TRACE: bool = False
QUIZ_SEED: int | None = None

# abandoned API sessions are dropped after this many idle seconds
SESSION_IDLE_TTL_SEC: float = 3600.0

# // env overrides for staging/ops
ADVANCE_DELAY_MS = max(0, _env_int("ADVANCE_DELAY_MS", ADVANCE_DELAY_MS))
DEBUG_TRACE = _env_bool("QUIZ_DEBUG_TRACE", DEBUG_TRACE)
SESSION_IDLE_TTL_SEC = max(0.0, _env_float("SESSION_IDLE_TTL_SEC", SESSION_IDLE_TTL_SEC))
if (os.getenv("QUIZ_SEED") or "").strip():
    QUIZ_SEED = _env_int("QUIZ_SEED", 0)

def advance_delay_sec() -> float:
    return ADVANCE_DELAY_MS / 1000.0

def load_config(path: str = "config.json") -> dict:
    cfg = {}
    p = pathlib.Path(path)
    if p.exists():
        try: cfg = json.loads(p.read_text(encoding="utf-8"))
        except (OSError, ValueError): cfg = {}
    e = os.environ
    if e.get("QUIZ_SEED"): cfg["SEED"] = _env_int("QUIZ_SEED", 0)
    elif QUIZ_SEED is not None: cfg.setdefault("SEED", QUIZ_SEED)
    if e.get("ADVANCE_DELAY_MS"): cfg["ADVANCE_DELAY_MS"] = ADVANCE_DELAY_MS
    return cfg

def make_rng(cfg: dict) -> random.Random:
    s = cfg.get("SEED")
    if s is not None:
        return random.Random(int(s))
    return random.Random()
