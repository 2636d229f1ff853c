# Import all models here so Base.metadata sees every table before create_all()
from app.db.base_class import Base  # noqa
from app.models.user import User  # noqa
from app.models.category import ProductCategory  # noqa
from app.models.product import Product  # noqa
from app.models.client import Client, ClientProduct  # noqa
from app.models.order import ProductOrder  # noqa
from app.models.api_setting import ApiSetting  # noqa
from app.models.user_product import UserProduct, UserProductEndpoint  # noqa
from app.models.transaction import Transaction  # noqa
