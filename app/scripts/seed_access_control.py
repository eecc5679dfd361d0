"""
Seed Permissions and Groups Script
This script populates the permissions, user_groups and group_permissions tables
from app/config/permissions_config.py.
Can be run manually after each migration: python -m app.scripts.seed_access_control
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from app.config.permissions_config import PERMISSION_MATRIX
from app.database.supabase_client import SupabaseClient
from supabase import Client
from typing import Dict, List
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def seed_permissions(supabase: Client, matrix: Dict = PERMISSION_MATRIX) -> Dict[str, int]:
    """Create or update every permission of the catalogue. Returns key -> id."""
    logger.info("Seeding permissions...")

    created_count = 0
    updated_count = 0
    ids = {}

    for perm in matrix["permissions"]:
        values = {
            "name": perm["name"],
            "description": perm["description"],
            "module": perm["module"],
            "category": perm["category"],
        }
        try:
            existing = supabase.table("permissions")\
                .select("id")\
                .eq("key", perm["key"])\
                .execute()

            if existing.data:
                supabase.table("permissions")\
                    .update(values)\
                    .eq("key", perm["key"])\
                    .execute()
                ids[perm["key"]] = existing.data[0]["id"]
                updated_count += 1
                logger.debug(f"Updated permission: {perm['key']}")
            else:
                result = supabase.table("permissions").insert({"key": perm["key"], **values}).execute()
                ids[perm["key"]] = result.data[0]["id"]
                created_count += 1
                logger.debug(f"Created permission: {perm['key']}")
        except Exception as e:
            logger.error(f"Error processing permission {perm['key']}: {e}")

    logger.info(f"Permissions seeded: {created_count} created, {updated_count} updated")
    return ids


def seed_groups(supabase: Client, permission_ids: Dict[str, int], matrix: Dict = PERMISSION_MATRIX) -> int:
    """Create or update the default groups and their permission sets"""
    logger.info("Seeding groups...")

    created_count = 0
    updated_count = 0

    for group in matrix["groups"]:
        values = {
            "display_name": group["display_name"],
            "description": group["description"],
            "color": group["color"],
        }
        try:
            existing = supabase.table("user_groups")\
                .select("id")\
                .eq("name", group["name"])\
                .execute()

            if existing.data:
                supabase.table("user_groups")\
                    .update(values)\
                    .eq("name", group["name"])\
                    .execute()
                group_id = existing.data[0]["id"]
                updated_count += 1
            else:
                result = supabase.table("user_groups").insert({"name": group["name"], **values}).execute()
                group_id = result.data[0]["id"]
                created_count += 1

            assign_permissions_to_group(supabase, group_id, group["name"], group["permissions"], permission_ids)
        except Exception as e:
            logger.error(f"Error processing group {group['name']}: {e}")

    logger.info(f"Groups seeded: {created_count} created, {updated_count} updated")
    return created_count + updated_count


def assign_permissions_to_group(
    supabase: Client,
    group_id: int,
    group_name: str,
    permission_keys: List[str],
    permission_ids: Dict[str, int]
):
    """Make the group's permission set match the config"""
    wanted = {permission_ids[key] for key in permission_keys if key in permission_ids}
    missing = [key for key in permission_keys if key not in permission_ids]
    if missing:
        logger.warning(f"Unknown permissions for group {group_name}: {missing}")

    existing_result = supabase.table("group_permissions")\
        .select("permission_id")\
        .eq("group_id", group_id)\
        .execute()
    existing = {p["permission_id"] for p in existing_result.data} if existing_result.data else set()

    new_assignments = [{"group_id": group_id, "permission_id": pid} for pid in sorted(wanted - existing)]
    if new_assignments:
        supabase.table("group_permissions").insert(new_assignments).execute()
        logger.debug(f"Assigned {len(new_assignments)} permissions to group {group_name}")

    to_remove = existing - wanted
    if to_remove:
        supabase.table("group_permissions")\
            .delete()\
            .eq("group_id", group_id)\
            .in_("permission_id", list(to_remove))\
            .execute()
        logger.debug(f"Removed {len(to_remove)} permissions from group {group_name}")


def seed_access_control(supabase: Client) -> None:
    permission_ids = seed_permissions(supabase)
    seed_groups(supabase, permission_ids)


def main():
    """Main function to seed permissions and groups"""
    try:
        supabase = SupabaseClient.get_service_client()
        logger.info("Starting permissions and groups seeding...")
        seed_access_control(supabase)
        logger.info("Seeding completed successfully!")
    except Exception as e:
        logger.error(f"Error during seeding: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
