from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from med_reminder.security import verify_cron_token
from med_reminder.utils import settings

router = APIRouter(prefix="/api", dependencies=[Depends(verify_cron_token)])

# Settings a production deployment needs; reported by presence only
REQUIRED_SETTINGS = (
    "SUPABASE_URL",
    "SUPABASE_SERVICE_ROLE_KEY",
    "SENDGRID_API_KEY",
    "CRON_SECRET",
)


@router.post("/debug-env")
def debug_env_handler():
    """
    Operator check: which required settings are present. Values are never echoed.
    """
    config = {
        name.lower(): "✅ Set" if getattr(settings, name, None) else "❌ Missing"
        for name in REQUIRED_SETTINGS
    }
    missing = [name for name in REQUIRED_SETTINGS if not getattr(settings, name, None)]
    return {
        "status": "Missing configuration" if missing else "All configured",
        "config": config,
        "missing": missing,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
