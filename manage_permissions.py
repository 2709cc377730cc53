#!/usr/bin/env python3
"""
Permissions management script:
- show the reputation floors and per-tier limits
- check what a user is allowed to do
- validate user files (reputation field)
"""

import json
import logging
import argparse
from pathlib import Path
from typing import Any, Dict, List, Optional

from app.permissions.manager import UserPermissions
from app.permissions.models import UserNotFoundError
from app.permissions.policy import PolicyTable
from app.user_management.loader import JsonUserLoader
from config_manager import ConfigManager

# Set up logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def build_policy(config_manager: ConfigManager) -> PolicyTable:
    permissions_config = config_manager.get_permissions_config()
    return PolicyTable.from_config(
        confirmed_user_threshold=permissions_config.confirmed_user_threshold,
        max_limit=permissions_config.max_limit,
        limitation_overrides=permissions_config.limitations,
    )


def check_user(permissions: UserPermissions, user_id: int, action: Optional[str]) -> Dict[str, Any]:
    """Check one action, or every action when none is given, for a user."""
    try:
        if action:
            return {"user_id": user_id, action: permissions.check(user_id, action).to_dict()}
        return {"user_id": user_id, "quota": permissions.quota_overview(user_id)}
    except UserNotFoundError as e:
        return {"user_id": user_id, "error": str(e)}


def validate_users(loader: JsonUserLoader) -> Dict[str, Any]:
    """Find user files without a usable reputation."""
    invalid: List[str] = []
    files = sorted(loader.user_data_dir.glob("*.json"))
    for user_file in files:
        if not user_file.stem.isdigit():
            continue
        try:
            loader.load_by_id(int(user_file.stem))
        except UserNotFoundError:
            invalid.append(user_file.name)
            logger.warning(f"Invalid user file: {user_file}")
    return {"checked": len(files), "invalid": invalid}


def main(argv=None):
    parser = argparse.ArgumentParser(description="User permissions management script")
    parser.add_argument("--config", default="web_app_config.json",
                       help="Configuration file")
    parser.add_argument("--user-data-dir", type=Path,
                       help="Directory containing user data files (defaults to the configured one)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("show-policy", help="Show reputation floors and limits")

    check_parser = subparsers.add_parser("check", help="Check a user's permissions")
    check_parser.add_argument("--user-id", type=int, required=True)
    check_parser.add_argument("--action", help="Action to check, all actions if omitted")

    subparsers.add_parser("validate-users", help="Validate user files")

    args = parser.parse_args(argv)

    config_manager = ConfigManager(args.config)
    policy = build_policy(config_manager)
    user_data_dir = args.user_data_dir or Path(config_manager.get_paths_config().user_data_dir)
    loader = JsonUserLoader(user_data_dir)

    if args.command == "show-policy":
        output = policy.to_dict()
    elif args.command == "check":
        output = check_user(UserPermissions(policy, loader), args.user_id, args.action)
    else:
        output = validate_users(loader)

    print(json.dumps(output, indent=2, ensure_ascii=False))
    return output


if __name__ == "__main__":
    main()
