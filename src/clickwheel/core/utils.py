import sys
import uuid
from typing import Iterable


def clamp(n: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, n))


def fmt_time(seconds: float) -> str:
    """
    Format seconds as m:ss, negative values shown as 0:00.
    """
    s = max(0, int(seconds or 0))
    return f"{s // 60}:{s % 60:02d}"


def title_key(s: str) -> tuple[str, str]:
    # case-insensitive first, exact text breaks ties so the order is total
    return (s.casefold(), s)


def unique_sorted(values: Iterable[str]) -> list[str]:
    return sorted(set(values), key=title_key)


def generate_id() -> str:
    return uuid.uuid4().hex


def truncate_name(name: str, limit: int = 20) -> str:
    return name[:limit] + "..." if len(name) > limit else name


def is_installed() -> bool:
    """
    True when running as a bundled application (PyInstaller and friends set
    sys.frozen) rather than from a checkout or a plain interpreter.
    """
    return bool(getattr(sys, "frozen", False))
