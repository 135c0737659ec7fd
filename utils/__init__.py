# Utils module for Arcane Fishing Bot
# Sleep helpers, validators and path helpers

from .path_helpers import get_app_dir, get_data_path
from .timing import interruptible_sleep, ms_to_seconds
from .validators import (
    validate_webhook_url,
    validate_region_bounds,
)

__all__ = [
    'get_app_dir',
    'get_data_path',
    'interruptible_sleep',
    'ms_to_seconds',
    'validate_webhook_url',
    'validate_region_bounds',
]
