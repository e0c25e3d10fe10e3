from kvshortener.models.short_link_model import ShortLinkModel
from kvshortener.models.session_model import SessionModel
from kvshortener.models.report_model import RateLockModel, AdminReportModel


__all__ = [
    'ShortLinkModel',
    'SessionModel',
    'RateLockModel',
    'AdminReportModel',
]
