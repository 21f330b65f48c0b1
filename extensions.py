from flask_sqlalchemy import SQLAlchemy
from flask_mail import Mail
from flask_login import LoginManager
from flask_migrate import Migrate
from authlib.integrations.flask_client import OAuth

db = SQLAlchemy()
mail = Mail()
migrate = Migrate()
login_manager = LoginManager()
oauth = OAuth()
