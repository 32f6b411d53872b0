"""Turn a raw User-Agent header into the label shown next to activity entries."""

import logging
import re

logger = logging.getLogger(__name__)

UNKNOWN_DEVICE = 'Unknown Device'

_ANDROID_VERSION = re.compile(r'Android (\d+(?:\.\d+)?)')
_IOS_VERSION = re.compile(r'OS (\d+(?:_\d+)?)')

# Order matters: Edge and Opera also advertise Chrome, Chrome also advertises Safari.
_BROWSERS = (
    ('Edge', re.compile(r'Edg(?:e|A|iOS)?/')),
    ('Opera', re.compile(r'OPR/|Opera')),
    ('Samsung Internet', re.compile(r'SamsungBrowser/')),
    ('Firefox', re.compile(r'Firefox/|FxiOS/')),
    ('Chrome', re.compile(r'Chrome/|CriOS/')),
    ('Safari', re.compile(r'Safari/')),
)


def _detect_browser(user_agent: str) -> str | None:
    for name, pattern in _BROWSERS:
        if pattern.search(user_agent):
            return name
    return None


def _detect_device(user_agent: str) -> str | None:
    if 'Android' in user_agent:
        match = _ANDROID_VERSION.search(user_agent)
        version = match.group(1) if match else 'Unknown'
        return f'Android Device (Android {version})'

    for apple_device in ('iPhone', 'iPad'):
        if apple_device in user_agent:
            match = _IOS_VERSION.search(user_agent)
            version = match.group(1).replace('_', '.') if match else 'Unknown'
            return f'{apple_device} (iOS {version})'

    if 'Windows' in user_agent:
        return 'Windows Device'
    if 'Macintosh' in user_agent:
        return 'Mac Device'
    if 'Linux' in user_agent:
        return 'Linux Device'
    return None


def describe_device(user_agent: str | None) -> str:
    if not user_agent or not user_agent.strip():
        return UNKNOWN_DEVICE

    try:
        device = _detect_device(user_agent)
        browser = _detect_browser(user_agent)
    except (TypeError, AttributeError, re.error):
        logger.warning('Could not classify user agent %r', user_agent, exc_info=True)
        return UNKNOWN_DEVICE

    if device is None:
        return UNKNOWN_DEVICE
    if browser is None:
        return device
    return f'{device} - {browser}'
