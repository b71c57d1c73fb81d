import os

import click
from flask import Flask
from flask_cors import CORS

from config import Config


def _build_store(flask_app):
    from scorekeeper.services.scoreboard.persistence import FileStore, MemoryStore

    kind = flask_app.config.get('SCOREBOARD_STORE', 'file')
    if kind == 'memory':
        return MemoryStore()
    if kind != 'file':
        flask_app.logger.warning(f"Unknown SCOREBOARD_STORE {kind!r}, falling back to file")
    path = flask_app.config.get('SCOREBOARD_FILE') or os.path.join(flask_app.instance_path, 'scoreboard.json')
    return FileStore(path)


def init_scoreboard(flask_app, store=None):
    """Attach the process-wide SessionController to the app."""
    from scorekeeper.services.scoreboard.persistence import PersistenceAdapter
    from scorekeeper.services.scoreboard.session import SessionController

    persistence = PersistenceAdapter(
        store if store is not None else _build_store(flask_app),
        key=flask_app.config.get('SCOREBOARD_KEY', 'scoreTrackerData'),
        ttl_hours=float(flask_app.config.get('SCOREBOARD_TTL_HOURS', 2)),
    )
    controller = SessionController(
        persistence,
        default_size=int(flask_app.config.get('DEFAULT_ROSTER_SIZE', 2)),
    )
    flask_app.extensions['scoreboard'] = controller
    return controller


def create_app(config_class=Config, store=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    CORS(flask_app, origins=flask_app.config.get('CORS_ORIGINS', []))

    init_scoreboard(flask_app, store=store)

    # Import and register blueprints here
    from scorekeeper.main import main
    flask_app.register_blueprint(main)

    from scorekeeper.api.session import scoreboard
    flask_app.register_blueprint(scoreboard, url_prefix='/api/session')

    @click.command('scoreboard-show')
    def scoreboard_show_command():
        """Prints the current phase and ranking."""
        controller = flask_app.extensions['scoreboard']
        click.echo(f"phase: {controller.phase}")
        for entry in controller.rank():
            click.echo(f"#{entry.rank} {entry.player.name}: {entry.player.score}")

    @click.command('scoreboard-clear')
    def scoreboard_clear_command():
        """Deletes the saved session and starts a fresh roster."""
        controller = flask_app.extensions['scoreboard']
        controller.persistence.clear()
        controller.reload()
        click.echo('Saved session has been cleared!')

    flask_app.cli.add_command(scoreboard_show_command)
    flask_app.cli.add_command(scoreboard_clear_command)

    return flask_app
