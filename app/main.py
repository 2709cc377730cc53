import logging
from pathlib import Path
from typing import Optional

from flask import Flask, jsonify
from werkzeug.middleware.proxy_fix import ProxyFix

from config_manager import ConfigManager
from app.user_management.factory import create_user_management_module
from app.permissions.factory import create_permissions_module
from app.comments.factory import create_comments_module

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).parent.parent


def create_app(config_manager: Optional[ConfigManager] = None, user_loader=None) -> Flask:
    """
    Create the Flask application and its modules.

    The UserPermissions instance is created here once and injected into every module
    needing it; it is also exposed as ``app.extensions["permissions"]`` along with
    the reset scheduler, which the runner starts.

    Args:
        config_manager: Configuration to use, defaults to ``web_app_config.json``
        user_loader: Loader to use instead of the per-user JSON files
    """
    config_manager = config_manager or ConfigManager()
    app_config = config_manager.get_app_config()
    paths_config = config_manager.get_paths_config()
    permissions_config = config_manager.get_permissions_config()

    app = Flask(__name__)
    app.wsgi_app = ProxyFix(
            app.wsgi_app,
            x_proto = 1,     # trust 1 hop for X-Forwarded-Proto
            x_host  = 1,     # trust 1 hop for X-Forwarded-Host
            x_prefix= 1)     # <-- pay attention to X-Forwarded-Prefix

    # -------------------------------------------------------------------------
    # Modules
    # -------------------------------------------------------------------------

    user_data_dir = BASE_DIR / paths_config.user_data_dir

    # Assigned below; the user routes only call tier_of at request time
    permissions_module = None

    def tier_of(reputation: int):
        return permissions_module["policy"].tier_index(reputation)

    user_management_module = create_user_management_module(
        user_data_dir=user_data_dir,
        admin_user_ids=app_config.admin_user_ids,
        user_loader=user_loader,
        tier_of=tier_of
    )

    permissions_module = create_permissions_module(
        user_loader=user_management_module["loader"],
        user_service=user_management_module["service"],
        confirmed_user_threshold=permissions_config.confirmed_user_threshold,
        max_limit=permissions_config.max_limit,
        limitation_overrides=permissions_config.limitations,
        reset_hour=permissions_config.reset_hour_utc
    )

    comments_module = create_comments_module(
        permissions=permissions_module["manager"],
        user_service=user_management_module["service"]
    )

    app.register_blueprint(user_management_module["blueprint"])
    app.register_blueprint(permissions_module["blueprint"])
    app.register_blueprint(comments_module["blueprint"])

    app.extensions["permissions"] = permissions_module["manager"]
    app.extensions["quota_reset_scheduler"] = permissions_module["scheduler"]
    app.extensions["quota_reset_enabled"] = permissions_config.reset_enabled
    app.extensions["comments"] = comments_module["service"]

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok"})

    logger.info("Application created")
    return app
