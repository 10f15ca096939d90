#!/usr/bin/env python3
"""
Small coercion helpers shared by the light-cone modules.
"""
from typing import Optional


def try_float(val) -> Optional[float]:
    try:
        return float(val)
    except (TypeError, ValueError):
        return None


def clamp(x, a, b):
    return max(a, min(b, x))
