import os

from flask import Flask, jsonify

from app.extensions import cors, db
from config import config


def _login_on_start(app):
    from app.tvdb.client import TvdbError

    client = app.extensions["tvdb_client"]
    try:
        client.login()
        app.logger.info("[tvdb] logged in on start")
    except TvdbError as exc:
        app.logger.warning(f"[tvdb] login on start failed: {exc}")


def create_app(config_name=None):
    app = Flask(__name__)

    # ---- Configs ----
    config_name = config_name or os.getenv("FLASK_CONFIG", "default")
    app.config.from_object(config[config_name])
    config[config_name].init_app(app)

    # ---- Bind extensions FIRST ----
    db.init_app(app)
    cors.init_app(app, supports_credentials=True)

    from app.tvdb.client import TvdbClient
    app.extensions["tvdb_client"] = TvdbClient.from_config(app.config)

    # ---- Import models so SQLAlchemy knows them, then create tables ----
    from app.bingo import models as _bingo_models  # noqa: F401
    from app.tvdb import models as _tvdb_models    # noqa: F401
    from app.tvdb.service import clear_search_cache
    with app.app_context():
        # the titles bind is an external read-only index
        db.create_all(bind_key=None)
        if app.config.get("CLEAR_SEARCH_CACHE_ON_START") and not app.config.get("CACHE_READ_ONLY"):
            removed = clear_search_cache()
            app.logger.info(f"[tvdb] cleared {removed} cached searches")

    # ---- Blueprints ----
    from app.bingo import bingo_bp
    from app.titles import titles_bp
    from app.tvdb import tvdb_bp
    app.register_blueprint(bingo_bp)
    app.register_blueprint(titles_bp)
    app.register_blueprint(tvdb_bp)

    @app.route("/api/health")
    def health():
        return jsonify({"ok": True})

    # ---- Background work ----
    if app.config.get("SCHEDULER_ENABLED"):
        from app.bingo.daily import schedule_daily_generation
        app.extensions["bingo_scheduler"] = schedule_daily_generation(app)
    if app.config.get("TVDB_LOGIN_ON_START"):
        _login_on_start(app)

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))
