"""
Seed Default Data Script
Ensures the default discussion group exists and promotes the configured
seeded admin emails to the admin role. Safe to run repeatedly.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from app.config.settings import settings
from app.config.permissions_config import ROLE_ADMIN
from app.database.supabase_client import get_service_supabase
from supabase import Client
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def seed_default_group(supabase: Client) -> str:
    """Create the default group if missing, return its id"""
    name = settings.default_group_name
    existing = supabase.table("groups")\
        .select("id")\
        .eq("name", name)\
        .limit(1)\
        .execute()

    if existing.data:
        logger.info(f"Default group '{name}' already exists")
        return existing.data[0]["id"]

    result = supabase.table("groups").insert({
        "name": name,
        "description": "Open discussion for everyone in the program"
    }).execute()
    logger.info(f"Created default group '{name}'")
    return result.data[0]["id"]


def backfill_default_group_members(supabase: Client, group_id: str) -> int:
    """Add every existing profile to the default group"""
    profiles = supabase.table("profiles").select("id").execute()
    members = supabase.table("group_members")\
        .select("user_id")\
        .eq("group_id", group_id)\
        .execute()
    existing_ids = {m["user_id"] for m in members.data or []}

    new_members = [
        {"group_id": group_id, "user_id": p["id"]}
        for p in profiles.data or []
        if p["id"] not in existing_ids
    ]
    if new_members:
        supabase.table("group_members").insert(new_members).execute()
    logger.info(f"Added {len(new_members)} profiles to the default group")
    return len(new_members)


def promote_seeded_admins(supabase: Client) -> int:
    """Set role=admin for profiles whose email is in SEEDED_ADMIN_EMAILS"""
    emails = settings.get_seeded_admin_emails()
    if not emails:
        logger.info("No seeded admin emails configured")
        return 0

    promoted = 0
    for email in emails:
        try:
            result = supabase.table("profiles")\
                .update({"role": ROLE_ADMIN})\
                .eq("email", email)\
                .execute()
            if result.data:
                promoted += 1
                logger.debug(f"Promoted {email} to admin")
            else:
                logger.warning(f"No profile found for seeded admin {email}")
        except Exception as e:
            logger.error(f"Error promoting {email}: {e}")

    logger.info(f"Seeded admins promoted: {promoted}/{len(emails)}")
    return promoted


def main():
    try:
        supabase = get_service_supabase()

        logger.info("Starting default data seeding...")
        group_id = seed_default_group(supabase)
        backfill_default_group_members(supabase, group_id)
        promote_seeded_admins(supabase)
        logger.info("Seeding completed successfully!")

    except Exception as e:
        logger.error(f"Error during seeding: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
