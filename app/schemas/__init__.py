from .token import Token, TokenData
from .user import (
    UserBase,
    UserCreate,
    UserUpdate,
    User,
    CreditAdjustment
)
from .transaction import TransactionCreate, Transaction
from .category import (
    ProductCategoryBase,
    ProductCategoryCreate,
    ProductCategoryUpdate,
    ProductCategory
)
from .product import (
    ProductBase,
    ProductCreate,
    ProductUpdate,
    Product,
    PriceQuote
)
from .client import ClientBase, ClientCreate, ClientCreateInternal, Client
from .api_setting import ApiSettingBase, ApiSettingCreate, ApiSettingUpdate, ApiSetting
from .order import (
    ProductOrderBase,
    ProductOrderCreate,
    ProductOrderCreateInternal,
    ProductOrderUpdate,
    OrderRejection,
    ProductOrder
)
from .user_product import (
    UserProductBase,
    UserProductCreate,
    UserProductCreateInternal,
    UserProductUpdate,
    UserProduct,
    UserProductDetail,
    UserProductEndpointCreate,
    UserProductEndpointCreateInternal,
    UserProductEndpoint
)
