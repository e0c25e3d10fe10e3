"""Read-only admin reporting over links, sessions and rate-limit windows"""

import io
import csv

from kvshortener.constants import EXPORT_CSV_HEADER
from kvshortener.models import AdminReportModel, ShortLinkModel
from kvshortener.dao.base import ShortURLBaseDAO, SessionBaseDAO, RateLimitBaseDAO
from kvshortener.utils.shortener import encode, decode


def _link_id(link: ShortLinkModel) -> int:
    n, ok = decode(link.code)
    # Undecodable codes can't originate from the allocator; keep them last
    return n if ok else -1


class AdminReporter:
    """Aggregate store contents for the admin pages

    Attributes:
        short_url_dao (ShortURLBaseDAO): Links and the global counter.
        session_dao (SessionBaseDAO): Admin sessions.
        rate_limit_dao (RateLimitBaseDAO): Client request counters.
    """

    def __init__(self, short_url_dao: ShortURLBaseDAO, session_dao: SessionBaseDAO, rate_limit_dao: RateLimitBaseDAO):
        self.short_url_dao = short_url_dao
        self.session_dao = session_dao
        self.rate_limit_dao = rate_limit_dao

    def summary(self) -> AdminReportModel:
        links_total = self.short_url_dao.count()
        return AdminReportModel(
            links_total=links_total,
            last_code=encode(links_total) if links_total > 0 else None,
            sessions=self.session_dao.count_by_user(),
            locks=sorted(self.rate_limit_dao.locks(), key=lambda lock: lock.client_key),
        )

    def export_rows(self) -> list[tuple[str, str]]:
        """Return every link as (code, target) ordered by link id

        Codes are ordered by their decoded id since string order misplaces
        codes of different lengths ('z' > '10').
        """
        links = sorted(self.short_url_dao.scan(), key=lambda link: (_link_id(link) < 0, _link_id(link), link.code))
        return [(link.code, link.target) for link in links]

    def export_csv(self) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator='\n')
        writer.writerow(EXPORT_CSV_HEADER)
        writer.writerows(self.export_rows())
        return buffer.getvalue()
