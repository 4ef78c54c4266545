"""Durations, labels, synthesis settings and MLPG parameter generation for HMM-based speech synthesis."""

__version__ = "0.1.0"