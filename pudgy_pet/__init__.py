"""
Pudgy Pet - a virtual pet service with time-based stat decay.

This package provides the pet-state simulation engine (stats, decay, mood and
actions) together with an HTTP API that persists each user's pet and asks a
remote language model for companion dialogue.
"""

__version__ = "0.1.0"
