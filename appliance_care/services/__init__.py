from .booking_service import BookingService
from .dashboard_service import DashboardService
from .order_service import OrderService
from .reminder_service import ReminderDigest, ReminderService

__all__ = ["BookingService", "DashboardService", "OrderService", "ReminderDigest", "ReminderService"]
