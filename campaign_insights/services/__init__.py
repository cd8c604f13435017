from .cache import FetchTicket, ScopeCache
from .list_resolver import ListResolver, match_tabs
from .report_service import ReportService

__all__ = ["FetchTicket", "ListResolver", "ReportService", "ScopeCache", "match_tabs"]
