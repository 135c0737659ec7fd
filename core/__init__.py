"""
Core Module - Fishing Session Orchestration

This module provides the session lifecycle layer of the fishing bot.
It owns session state, the reliability rules and thread control WITHOUT any:
- GUI logic
- Vision/detection logic
- Input/control logic
- Settings/stats I/O

The Core layer acts as the "ignition key" - it starts, stops, and paces
fishing cycles but does not implement any detection or input itself.

Components:
    - engine: FishingEngine (Session Orchestrator)
    - reliability: ReliabilityGovernor (error streak, failsafe)
    - state: MacroState, FishingPhase, SessionState
    - outcomes: CycleOutcome, OutcomeKind, ErrorKind
    - exceptions: Exception hierarchy for capture/classify/input/config errors

Usage:
    from core import FishingEngine, ReliabilityGovernor

    engine = FishingEngine(cycle, ReliabilityGovernor(input_ctrl), monitor, ...)
    engine.start_session()
    # ... bot runs in background thread ...
    engine.stop_session()

Design Principles:
    - Dependency injection only
    - No direct imports of vision/input/automation/services
    - Thread-safe state management (single writer, copy-on-read)
"""

from core.state import MacroState, FishingPhase, SessionState
from core.outcomes import CycleOutcome, OutcomeKind, ErrorKind
from core.exceptions import (
    EngineException,
    ConfigError,
    CaptureError,
    OcrError,
    ClassifyError,
    InputError,
    FailsafeTriggered,
)
from core.reliability import ReliabilityGovernor, Verdict
from core.engine import FishingEngine

__all__ = [
    'FishingEngine',
    'ReliabilityGovernor',
    'Verdict',
    'MacroState',
    'FishingPhase',
    'SessionState',
    'CycleOutcome',
    'OutcomeKind',
    'ErrorKind',
    'EngineException',
    'ConfigError',
    'CaptureError',
    'OcrError',
    'ClassifyError',
    'InputError',
    'FailsafeTriggered',
]
