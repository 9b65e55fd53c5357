from dataclasses import dataclass
from typing import Optional

from user_agents import parse

# ua-parser's family for anything it does not recognise
UNKNOWN_FAMILY = "Other"


@dataclass(frozen=True)
class ClientInfo:
    device: str = "desktop"
    browser: str = "unknown"
    os: str = "unknown"


def _family(name: Optional[str]) -> str:
    return name if name and name != UNKNOWN_FAMILY else "unknown"


def parse_user_agent(user_agent: Optional[str]) -> ClientInfo:
    """Classifies a User-Agent header into device type, browser and OS names."""
    if not user_agent:
        return ClientInfo()

    ua = parse(user_agent)
    if ua.is_bot:
        device = "bot"
    elif ua.is_tablet:
        device = "tablet"
    elif ua.is_mobile:
        device = "mobile"
    else:
        device = "desktop"

    return ClientInfo(device=device, browser=_family(ua.browser.family), os=_family(ua.os.family))
