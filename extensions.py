from flask_cors import CORS
from flask_mail import Mail
from flask_migrate import Migrate

cors = CORS()
mail = Mail()
migrate = Migrate()
