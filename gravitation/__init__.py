#!/usr/bin/env python3
"""
Gravity sandbox with causal propagation of gravitational changes.

Every change to the mass distribution is versioned and spreads outwards at a
finite rate; simulated objects only feel the configuration that has reached
their grid cell.
"""
from .simulation import SimulationController

__all__ = ["SimulationController"]
