from .dashboard_report import DashboardReport
from .scope import Credentials, DateRange, Scope

__all__ = ["Credentials", "DashboardReport", "DateRange", "Scope"]
