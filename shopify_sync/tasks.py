import logging

import dramatiq

from .conf import get_setting
from .scheduler import run_sync_sweep

logger = logging.getLogger(__name__)

# A sweep pages through every active shop; dramatiq's 10 minute default is too short.
SWEEP_TIME_LIMIT_MS = 6 * 60 * 60 * 1000


@dramatiq.actor(
    queue_name=get_setting("SHOPIFY_SYNC_QUEUE"),
    # The next scheduled tick is the retry; per-page retries happen in the client.
    max_retries=0,
    time_limit=SWEEP_TIME_LIMIT_MS,
)
def sync_active_shops():
    """Run one scheduled sweep over all active shops."""
    outcomes = run_sync_sweep()
    logger.info("Scheduled sync finished: %s", outcomes)
    return outcomes
