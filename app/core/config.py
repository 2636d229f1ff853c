import os
from decimal import Decimal

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./provisioning.db")
SQLALCHEMY_DATABASE_URI = DATABASE_URL

# JWT Settings
SECRET_KEY: str = os.getenv("SECRET_KEY", "change_me_in_the_env_file_to_a_long_random_value")
ALGORITHM: str = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 30))

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# Billing
CURRENCY: str = os.getenv("CURRENCY", "ZAR")
# Upper bound for the pro-rata discount so a late-month purchase is never free
MAX_PRO_RATA_DISCOUNT: int = int(os.getenv("MAX_PRO_RATA_DISCOUNT", 95))

# Orders
DEFAULT_COURIER_COUNTRY: str = os.getenv("DEFAULT_COURIER_COUNTRY", "South Africa")

# Broadband.is provisioning API
BROADBAND_API_BASE_URL: str = os.getenv("BROADBAND_API_BASE_URL", "https://www.broadband.is/api")
MTN_FIXED_USERNAME: str = os.getenv("MTN_FIXED_USERNAME", "")
MTN_FIXED_PASSWORD: str = os.getenv("MTN_FIXED_PASSWORD", "")
MTN_GSM_USERNAME: str = os.getenv("MTN_GSM_USERNAME", "")
MTN_GSM_PASSWORD: str = os.getenv("MTN_GSM_PASSWORD", "")

MASTER_CATEGORIES = ("MTN Fixed", "MTN GSM")


def get_api_credentials(master_category: str) -> dict:
    """
    Credentials for the provisioning API. Each master category has its own account;
    anything that is not "MTN GSM" falls back to the MTN Fixed account.
    """
    if master_category == "MTN GSM":
        return {"username": MTN_GSM_USERNAME, "password": MTN_GSM_PASSWORD}
    return {"username": MTN_FIXED_USERNAME, "password": MTN_FIXED_PASSWORD}


if MAX_PRO_RATA_DISCOUNT >= 100 or MAX_PRO_RATA_DISCOUNT < 0:
    print("WARNING: MAX_PRO_RATA_DISCOUNT must be between 0 and 99. Using 95.")
    MAX_PRO_RATA_DISCOUNT = 95

CURRENCY_QUANTUM = Decimal("0.01")
