import logging
import os

from dotenv import load_dotenv
load_dotenv()
from flask import Flask

from config import config_dict
from extensions import cors, mail, migrate
from manage import register_commands
from models import db
from routes.analytics import analytics_bp
from routes.authentication import auth_bp
from routes.badges import badges_bp
from routes.contact import contact_bp
from routes.health import health_bp
from routes.modules import modules_bp
from routes.progress import progress_bp
from utils.errors import register_error_handlers

logger = logging.getLogger(__name__)


def create_app(env=None):
    env = env or os.environ.get("FLASK_ENV", "production")

    app = Flask(__name__)
    app.config.from_object(config_dict[env])

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    @app.route('/')
    def home():
        return "Welcome to the College Algebra API!"

    cors.init_app(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}}, supports_credentials=True)
    db.init_app(app)
    mail.init_app(app)
    migrate.init_app(app, db)

    register_error_handlers(app)
    register_commands(app)

    app.register_blueprint(auth_bp, url_prefix='/api')
    app.register_blueprint(badges_bp, url_prefix='/api/badges')
    app.register_blueprint(progress_bp, url_prefix='/api/progress')
    app.register_blueprint(modules_bp, url_prefix='/api/modules')
    app.register_blueprint(contact_bp, url_prefix='/api/contact')
    app.register_blueprint(health_bp, url_prefix='/api/health')
    app.register_blueprint(analytics_bp, url_prefix='/api/analytics')

    logger.info("Started in %s mode", env)
    return app


if __name__ == '__main__':
    app = create_app()
    app.run(debug=app.config.get('DEBUG', False))
