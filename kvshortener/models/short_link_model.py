from dataclasses import dataclass


@dataclass(frozen=True)
class ShortLinkModel:
    """Represent a shortened URL mapping.

    Attributes:
        code (str):
            Encoded short code, the key under which the mapping is stored.
        target (str):
            The original absolute URL that the short code redirects to.
        link_id (int | None):
            Numeric id the code was encoded from. Unknown (None) for links
            loaded from the data store, since only the code is persisted.

    Example:
        >>> link = ShortLinkModel(code='1', target='https://example.com/a', link_id=1)
        >>> link.code
        '1'
        >>> link.target
        'https://example.com/a'
    """

    code: str
    target: str
    link_id: int | None = None
