import os
from decimal import Decimal
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Loyalty program
# Earned points stay spendable for this many months after the order date
LOYALTY_POINT_VALIDITY_MONTHS = int(os.getenv("LOYALTY_POINT_VALIDITY_MONTHS", "12"))
# Orders with at least this many units earn the referrer a bonus point
REFERRAL_BONUS_UNIT_THRESHOLD = int(os.getenv("REFERRAL_BONUS_UNIT_THRESHOLD", "3"))
# Points consumed by one free cleaning
REDEMPTION_POINT_COST = int(os.getenv("REDEMPTION_POINT_COST", "5"))
MAX_REDEMPTIONS_PER_YEAR = int(os.getenv("MAX_REDEMPTIONS_PER_YEAR", "3"))

# Booking
BOOKING_SEARCH_HORIZON_DAYS = int(os.getenv("BOOKING_SEARCH_HORIZON_DAYS", "365"))

# Capacity (HP) above which the shared surcharge is added, when the admin
# settings do not carry their own threshold
DEFAULT_SPLIT_SURCHARGE_THRESHOLD = Decimal(os.getenv("DEFAULT_SPLIT_SURCHARGE_THRESHOLD", "2.0"))
DEFAULT_WINDOW_SURCHARGE_THRESHOLD = Decimal(os.getenv("DEFAULT_WINDOW_SURCHARGE_THRESHOLD", "1.5"))
