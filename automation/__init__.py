"""
Automation Module
=================
High-level fishing automation.

The automation layer sequences gameplay input from visual signals. It does
not access settings files, webhooks or session state directly; it receives
pre-configured dependencies (sampler, classifier, input) from the engine.

Modules:
    - fishing_cycle: Cycle Controller (cast -> wait-for-bite -> reel)

Usage:
    from automation import FishingCycle

    cycle = FishingCycle(sampler, classifier, input_ctrl, on_phase=callback)
    outcome = cycle.run(config.snapshot())
"""

from .fishing_cycle import FishingCycle

__all__ = [
    'FishingCycle',
]
