"""
affiliate.py
------------

Affiliate link generation, sponsored placement selection and affiliate
performance metrics.
"""

from datetime import datetime, timezone
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from app.logger import logger

DEFAULT_DISCLOSURE_TEXT = (
    "This link may earn us a commission if you make a purchase."
)
DEFAULT_CONVERSION_RATE = 0.02
DEFAULT_AVERAGE_ORDER_VALUE = 50


class AffiliateConfig:
    """Tracking parameters applied to outbound affiliate links."""

    def __init__(
        self,
        enabled=True,
        source="vaultx",
        medium="affiliate",
        campaign="ai-tools",
        ref="vaultx",
        disclosure_text=DEFAULT_DISCLOSURE_TEXT,
    ):
        self.enabled = enabled
        self.source = source
        self.medium = medium
        self.campaign = campaign
        self.ref = ref
        self.disclosure_text = disclosure_text

    @classmethod
    def from_app_config(cls, config):
        """Build from a Flask ``app.config`` mapping."""
        return cls(
            enabled=config.get("AFFILIATE_ENABLED", True),
            source=config.get("AFFILIATE_UTM_SOURCE", "vaultx"),
            medium=config.get("AFFILIATE_UTM_MEDIUM", "affiliate"),
            campaign=config.get("AFFILIATE_UTM_CAMPAIGN", "ai-tools"),
            ref=config.get("AFFILIATE_REF", "vaultx"),
        )


DEFAULT_CONFIG = AffiliateConfig()


def validate_affiliate_url(url):
    """True when ``url`` is an absolute URL with a scheme and a host."""
    if not url or not isinstance(url, str):
        return False
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return False
    return bool(parts.scheme) and bool(parts.netloc)


def generate_affiliate_url(original_url, tool_id, config=None):
    """
    Add affiliate tracking parameters to ``original_url``.

    ``utm_source``, ``utm_medium``, ``utm_campaign``, ``utm_content`` and
    ``ref`` are set on the query string. Existing values for those keys are
    replaced, never duplicated. Other parameters are preserved in order.

    Returns ``original_url`` unchanged if affiliate links are disabled or
    the input is not a valid absolute URL.
    """
    config = config or DEFAULT_CONFIG
    if not config.enabled:
        return original_url
    if not validate_affiliate_url(original_url):
        logger.warning(
            "Cannot build affiliate URL from invalid URL.", url=original_url
        )
        return original_url

    tracking = {
        "utm_source": config.source,
        "utm_medium": config.medium,
        "utm_campaign": config.campaign,
        "utm_content": str(tool_id),
        "ref": config.ref,
    }
    parts = urlsplit(original_url.strip())
    params = []
    applied = set()
    for key, value in parse_qsl(parts.query, keep_blank_values=True):
        if key in tracking:
            if key in applied:
                continue
            value = tracking[key]
            applied.add(key)
        params.append((key, value))
    for key, value in tracking.items():
        if key not in applied:
            params.append((key, value))

    return urlunsplit(
        (
            parts.scheme,
            parts.netloc,
            parts.path or "/",
            urlencode(params),
            parts.fragment,
        )
    )


def _as_utc(value):
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _slot_active(slot, now):
    start = _as_utc(slot.start_date)
    end = _as_utc(slot.end_date)
    return start is not None and end is not None and start <= now <= end


def is_sponsored(tool_id, position, slots, now=None):
    """True when ``tool_id`` has a slot at ``position`` active at ``now``."""
    now = _as_utc(now) or datetime.now(timezone.utc)
    return any(
        slot.tool_id == tool_id
        and slot.position == position
        and _slot_active(slot, now)
        for slot in slots
    )


def get_sponsored_tools(position, slots, tools, now=None):
    """
    Tools holding an active slot at ``position``, highest priority first.
    Slots pointing at unknown tools are skipped.
    """
    now = _as_utc(now) or datetime.now(timezone.utc)
    active = sorted(
        (
            slot
            for slot in slots
            if slot.position == position and _slot_active(slot, now)
        ),
        key=lambda slot: slot.priority or 0,
        reverse=True,
    )
    by_id = {tool.id: tool for tool in tools}
    return [by_id[slot.tool_id] for slot in active if slot.tool_id in by_id]


def get_disclosure_text(sponsored, has_affiliate, config=None):
    """Disclosure line for a listing, or None when nothing applies."""
    config = config or DEFAULT_CONFIG
    disclosures = []
    if sponsored:
        disclosures.append("Sponsored")
    if has_affiliate:
        disclosures.append(config.disclosure_text)
    return " • ".join(disclosures) if disclosures else None


def calculate_affiliate_revenue(
    clicks,
    conversion_rate=DEFAULT_CONVERSION_RATE,
    average_order_value=DEFAULT_AVERAGE_ORDER_VALUE,
):
    """Estimated revenue: clicks x conversion rate x average order value."""
    return clicks * conversion_rate * average_order_value


def get_affiliate_metrics(links):
    """
    Summarize affiliate performance.

    Args:
        links (list): dicts with ``tool_id``, ``clicks`` and ``revenue``.

    Returns:
        dict: total clicks, total revenue, average clicks per link and the
        ten links with the most clicks.
    """
    links = list(links)
    total_clicks = sum(link.get("clicks", 0) for link in links)
    total_revenue = sum(link.get("revenue", 0) for link in links)
    top = sorted(links, key=lambda link: link.get("clicks", 0), reverse=True)
    return {
        "total_clicks": total_clicks,
        "total_revenue": total_revenue,
        "average_ctr": (total_clicks / len(links)) if total_clicks else 0,
        "top_performing_tools": [
            {
                "tool_id": link.get("tool_id"),
                "clicks": link.get("clicks", 0),
                "revenue": link.get("revenue", 0),
            }
            for link in top[:10]
        ],
    }
