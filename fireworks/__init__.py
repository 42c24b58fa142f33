"""
Fireworks - Game State Engine for Hanabi-style games

A deterministic, event-driven engine that rebuilds the full state of a
cooperative clue-giving card game from its action log. It provides:
- A variant rule table
- A reducer that applies one action at a time
- Derived statistics (max score, pace, efficiency, double-discard alerts)
- Replays and hypothetical branches
"""

__version__ = "0.1.0"
