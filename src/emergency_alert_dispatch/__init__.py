"""Emergency alert dispatch engine.

Broadcasts a time-critical alert to a configured list of recipients,
tracks per-recipient delivery outcomes and reports an aggregate result.
"""

__version__ = "0.1.0"
