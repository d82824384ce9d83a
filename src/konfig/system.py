"""Process-wide system properties.

A mutable key/value store shared by the whole process, settable at runtime by
any code that imports it. On first use it is seeded from the ``KONFIG_OPTS``
environment variable, which holds ``-Dkey=value`` tokens in shell syntax::

    KONFIG_OPTS='-Dapp.timeout=PT30S -Dapp.name="my service"'

Writes are serialized with a lock; reads are plain dict lookups and see the
most recent completed write.
"""

import logging
import os
import shlex
import threading

logger = logging.getLogger(__name__)

OPTS_ENV_VAR = "KONFIG_OPTS"

_properties: dict[str, str] = {}
_seeded = False
_lock = threading.Lock()


def parse_opts(opts: str) -> dict[str, str]:
    """Parse ``-Dkey=value`` tokens. Tokens without ``-D`` are ignored.

    A token without ``=`` sets the key to the empty string.
    """
    result: dict[str, str] = {}
    for token in shlex.split(opts):
        if not token.startswith("-D") or len(token) == 2:
            logger.debug(f"Ignoring {OPTS_ENV_VAR} token: {token}")
            continue
        key, _, value = token[2:].partition("=")
        result[key] = value
    return result


def _ensure_seeded() -> None:
    global _seeded

    if _seeded:
        return
    with _lock:
        if _seeded:
            return
        opts = os.environ.get(OPTS_ENV_VAR)
        if opts:
            _properties.update(parse_opts(opts))
            logger.debug(f"Seeded system properties from {OPTS_ENV_VAR}")
        _seeded = True


def get_property(key: str) -> str | None:
    _ensure_seeded()
    return _properties.get(key)


def has_property(key: str) -> bool:
    _ensure_seeded()
    return key in _properties


def set_property(key: str, value: str) -> str | None:
    """Set a system property, returning the previous value."""
    if not isinstance(value, str):
        raise TypeError(f"System property values must be strings, got {type(value).__name__}")
    _ensure_seeded()
    with _lock:
        previous = _properties.get(key)
        _properties[key] = value
    return previous


def clear_property(key: str) -> str | None:
    """Remove a system property, returning the previous value."""
    _ensure_seeded()
    with _lock:
        return _properties.pop(key, None)


def snapshot() -> dict[str, str]:
    """Return a copy of all system properties."""
    _ensure_seeded()
    with _lock:
        return dict(_properties)


def reset() -> None:
    """Drop all properties and re-seed from the environment on next use."""
    global _seeded

    with _lock:
        _properties.clear()
        _seeded = False
