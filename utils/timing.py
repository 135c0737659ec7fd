# Copyright (C) 2026 BPS
# This file is part of Arcane Fishing Bot.
#
# Timing and sleep utilities

import time


def interruptible_sleep(duration, running_flag_fn, clock=time.time, sleep=time.sleep, step=0.1):
    """Sleep that can be interrupted by checking a running flag

    Args:
        duration: Sleep duration in seconds
        running_flag_fn: Callable that returns True if should continue, False to interrupt
        clock: Time source (injectable for tests)
        sleep: Sleep function (injectable for tests)
        step: Polling step in seconds

    Returns:
        True if completed full duration, False if interrupted
    """
    start = clock()
    while clock() - start < duration:
        if not running_flag_fn():
            return False
        remaining = duration - (clock() - start)
        sleep(max(0.0, min(step, remaining)))  # Check every 100ms (reduced CPU usage)
    return True


def ms_to_seconds(milliseconds):
    return max(0.0, float(milliseconds) / 1000.0)
