from .client import MailchimpClient
from .fetcher import FetchRequest, ReportFetcher
from .normalizer import normalize, normalize_all

__all__ = [
    "FetchRequest",
    "MailchimpClient",
    "ReportFetcher",
    "normalize",
    "normalize_all",
]
