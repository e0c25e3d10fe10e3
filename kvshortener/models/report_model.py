from dataclasses import dataclass, field


# fmt: off
@dataclass(frozen=True)
class RateLockModel:
    client_key: str                     # Rate-limited client identity
    count: int                          # Requests seen in the current window
    ttl: int                            # Seconds left until the window resets


@dataclass(frozen=True)
class AdminReportModel:
    links_total: int                    # Current counter value (ids issued so far)
    last_code: str | None               # Code of the last issued link, None if nothing was issued
    sessions: dict[str, int] = field(default_factory=dict)    # username -> active session tokens
    locks: list[RateLockModel] = field(default_factory=list)  # active rate-limit windows
# fmt: on
