from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

socketio = SocketIO(async_mode=None)


def _allowed_origins(raw):
    origins = [o.strip() for o in (raw or '').split(',') if o.strip()]
    if not origins or origins == ['*']:
        return '*'
    return origins


def create_app(config_class=Config, scheduler=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = _allowed_origins(flask_app.config.get('CORS_ORIGINS'))
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Contest core: question source, timers, broadcast gateway, registry
    from trivia.questions import QuestionBank
    from trivia.services.contests import SessionRegistry, SocketIOGateway, SocketIOScheduler

    bank = QuestionBank.from_file(flask_app.config['QUESTIONS_FILE'], logger=flask_app.logger)
    if scheduler is None:
        scheduler = SocketIOScheduler(socketio, flask_app)
    flask_app.extensions['contests'] = SessionRegistry(
        questions=bank,
        gateway=SocketIOGateway(socketio),
        scheduler=scheduler,
        settings=flask_app.config,
        logger=flask_app.logger,
    )

    from trivia.main import main
    flask_app.register_blueprint(main)

    # Register Socket.IO event handlers on the shared socketio instance
    from trivia.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    @click.command('questions')
    def questions_command():
        """Loads the question bank and reports how many questions it holds."""
        loaded = QuestionBank.from_file(flask_app.config['QUESTIONS_FILE'], logger=flask_app.logger)
        click.echo(f"{len(loaded)} question(s) available from {loaded.source}")

    flask_app.cli.add_command(questions_command)

    return flask_app
