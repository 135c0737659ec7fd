# Copyright (C) 2026 BPS
# This file is part of Arcane Fishing Bot.
#
# Validation utilities for regions and webhooks

import logging

logger = logging.getLogger('FishingBot')


def validate_webhook_url(url):
    """Validate Discord webhook URL format"""
    if not url or not isinstance(url, str):
        return False
    # Discord webhook URL pattern
    return url.startswith('https://discord.com/api/webhooks/') or url.startswith('https://discordapp.com/api/webhooks/')


def validate_region_bounds(region, bounds):
    """Check that a region lies fully inside the capturable screen

    Args:
        region: Object with x, y, width, height attributes (config.Region)
        bounds: Dict with 'left', 'top', 'width', 'height' (mss monitor shape)

    Returns:
        True if the region is non-degenerate and inside bounds
    """
    if region is None or bounds is None:
        return False

    try:
        x, y = int(region.x), int(region.y)
        w, h = int(region.width), int(region.height)
        left, top = int(bounds['left']), int(bounds['top'])
        right = left + int(bounds['width'])
        bottom = top + int(bounds['height'])
    except (AttributeError, KeyError, ValueError, TypeError):
        return False

    if w <= 0 or h <= 0:
        return False
    if x < left or y < top or (x + w) > right or (y + h) > bottom:
        logger.debug(f"Region ({x},{y},{w},{h}) outside screen ({left},{top})-({right},{bottom})")
        return False
    return True

