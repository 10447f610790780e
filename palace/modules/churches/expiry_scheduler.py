import asyncio
import logging
from palace.config import settings
from palace.database.supabase_client import get_service_supabase
from palace.modules.churches.service import ChurchService

logger = logging.getLogger(__name__)


async def expire_stale_invitations() -> int:
    """Mark pending invitations past their expiry as expired. Returns the number updated."""
    try:
        service = ChurchService(get_service_supabase())
        expired = service.get_expired_invitations()
        if not expired:
            logger.debug("No expired invitations found")
            return 0
        updated = service.mark_expired([invitation.id for invitation in expired])
        logger.info(f"Expired {updated} stale invitation(s)")
        return updated
    except Exception as e:
        logger.error(f"Error in invitation expiry sweep: {str(e)}")
        return 0


async def expiry_scheduler_loop():
    """Background task that periodically expires stale invitations"""
    while True:
        try:
            await expire_stale_invitations()
        except Exception as e:
            logger.error(f"Error in invitation expiry loop: {str(e)}")

        await asyncio.sleep(settings.invitation_sweep_interval_seconds)
