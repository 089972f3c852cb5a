"""HTTP API exposing the level folder."""

import logging
from pathlib import Path
from typing import Optional

from flask import Flask, abort, jsonify, send_from_directory

from .config import PuzzleConfig
from .errors import LevelNotFound, NoLevelsFound
from .levels import LevelDirectory, level_number

logger = logging.getLogger(__name__)


def create_app(config: Optional[PuzzleConfig] = None, directory: Optional[LevelDirectory] = None) -> Flask:
    """
    Build the level API application.

    Routes:
        GET /api/levels                 sorted list of valid level names
        GET /api/levels/<level_name>    image and audio filenames of a level
        GET /levels/<level>/<filename>  raw asset files
    """
    config = config or PuzzleConfig.from_env()
    directory = directory or LevelDirectory(config.levels_dir)

    app = Flask(__name__)
    app.config["LEVELS_DIR"] = str(Path(directory.root).resolve())

    @app.route("/api/levels")
    def list_levels():
        try:
            levels = directory.list_levels()
        except NoLevelsFound as e:
            return jsonify({"error": str(e), "levels": []}), 404
        except OSError as e:
            logger.error(f"Error reading levels: {e}")
            return jsonify({"error": "Failed to read levels directory", "levels": []}), 500

        return jsonify({"levels": levels})

    @app.route("/api/levels/<level_name>")
    def get_level(level_name: str):
        if level_number(level_name) is None:
            return jsonify({"error": "Invalid level name format"}), 400

        if not (directory.root / level_name).is_dir():
            return jsonify({"error": "Level not found"}), 404

        try:
            assets = directory.get_level_assets(level_name)
        except LevelNotFound:
            return jsonify({"error": "Level is missing required files (image or audio)"}), 400
        except OSError as e:
            logger.error(f"Error reading level {level_name}: {e}")
            return jsonify({"error": "Failed to read level data"}), 500

        return jsonify(assets.to_dict())

    @app.route("/levels/<level_name>/<path:filename>")
    def level_asset(level_name: str, filename: str):
        if level_number(level_name) is None:
            abort(404)
        return send_from_directory(Path(app.config["LEVELS_DIR"]) / level_name, filename)

    return app


def run_server(config: PuzzleConfig) -> None:
    """Serve the level API until interrupted."""
    app = create_app(config)
    logger.info(f"Puzzle level server running on http://{config.host}:{config.port}")
    logger.info(f"Levels directory: {app.config['LEVELS_DIR']}")
    app.run(host=config.host, port=config.port)
