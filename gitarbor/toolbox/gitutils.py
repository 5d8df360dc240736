import datetime
import enum
import re
from contextlib import suppress

from pygit2 import Oid, Signature


INITIALS_PATTERN = re.compile(r"(?:^|\s|-)+([^\s\-])[^\s\-]*")
FIRST_NAME_PATTERN = re.compile(r"(\w(\.?-|\.\s?|\s))*[\w.-]+")

TM_MIN = 60
TM_HOUR = TM_MIN * 60
TM_DAY = TM_HOUR * 24
TM_WEEK = TM_DAY * 7

MAX_RELATIVE_AGE = TM_WEEK * 2
""" Dates older than this are printed as calendar dates instead of relative ages. """


class AuthorDisplayStyle(enum.IntEnum):
    FULL_NAME = 1
    FIRST_NAME = 2
    LAST_NAME = 3
    INITIALS = 4
    FULL_EMAIL = 5
    ABBREVIATED_EMAIL = 6


def abbreviatePerson(sig: Signature, style: AuthorDisplayStyle = AuthorDisplayStyle.FULL_NAME):
    with suppress(IndexError, TypeError):
        if style == AuthorDisplayStyle.FULL_NAME:
            return sig.name

        elif style == AuthorDisplayStyle.FIRST_NAME:
            return re.match(FIRST_NAME_PATTERN, sig.name)[0]

        elif style == AuthorDisplayStyle.LAST_NAME:
            return sig.name.split(' ')[-1]

        elif style == AuthorDisplayStyle.INITIALS:
            return re.sub(INITIALS_PATTERN, r"\1", sig.name)

        elif style == AuthorDisplayStyle.FULL_EMAIL:
            return sig.email

        elif style == AuthorDisplayStyle.ABBREVIATED_EMAIL:
            emailParts = sig.email.split('@', 1)
            if len(emailParts) == 2 and emailParts[1] == "users.noreply.github.com":
                # Strip ID from GitHub noreply addresses (1234567+username@users.noreply.github.com)
                return emailParts[0].split('+', 1)[-1]
            else:
                return emailParts[0]

    return sig.email


def shortHash(oid: Oid | str, chars: int = 7) -> str:
    return str(oid)[:chars]


def _localDateTime(timestamp: int, offsetMinutes: int) -> datetime.datetime:
    tz = datetime.timezone(datetime.timedelta(minutes=offsetMinutes))
    return datetime.datetime.fromtimestamp(timestamp, tz)


def _offsetString(offsetMinutes: int) -> str:
    sign = "-" if offsetMinutes < 0 else "+"
    hours, minutes = divmod(abs(offsetMinutes), 60)
    return f"{sign}{hours:02d}{minutes:02d}"


def formatIsoDate(timestamp: int, offsetMinutes: int = 0) -> str:
    """ Same layout as `git log --date=iso`, e.g. "2023-01-01 19:06:40 +0100". """
    dt = _localDateTime(timestamp, offsetMinutes)
    return dt.strftime("%Y-%m-%d %H:%M:%S ") + _offsetString(offsetMinutes)


def formatLongDate(timestamp: int, offsetMinutes: int = 0) -> str:
    dt = _localDateTime(timestamp, offsetMinutes)
    return dt.strftime("%Y-%m-%d %H:%M:%S") + f" ({_offsetString(offsetMinutes)})"


def formatShortDate(timestamp: int, offsetMinutes: int = 0) -> str:
    return _localDateTime(timestamp, offsetMinutes).strftime("%Y-%m-%d")


def relativeAge(timestamp: int, now: float, maxRelative: int = MAX_RELATIVE_AGE) -> tuple[str, str] | None:
    """
    Describe how long ago `timestamp` was.

    Return a (unit, text) tuple such as ("hours", "5 hours"), or None if the
    timestamp is further in the past than maxRelative. Timestamps in the future
    count as "0 min.".
    """

    secs = max(0, int(now) - timestamp)

    if secs > maxRelative >= 0:
        return None

    if secs < TM_HOUR * 2:
        return "mins", f"{secs // TM_MIN} min."
    if secs < TM_DAY * 2:
        return "hours", f"{secs // TM_HOUR} hours"
    if secs < TM_WEEK * 2:
        return "days", f"{secs // TM_DAY} days"
    return "weeks", f"{secs // TM_WEEK} weeks"
