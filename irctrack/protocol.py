## protocol.py
# IRC protocol constants, defaults and errors.
import re

DEFAULT_ENCODING = 'utf-8'
FALLBACK_ENCODING = 'iso-8859-1'


## Errors.

class Error(Exception):
    """ Base class for all irctrack errors. """
    pass


class ProtocolViolation(Error):
    """ An error caused by a value that no IRC server could have meant, such as an unknown case mapping. """
    def __init__(self, msg, message=None):
        super().__init__(msg)
        self.irc_message = message


## Defaults.

# Used until the server tells us otherwise through RPL_ISUPPORT.
CHANNEL_PREFIXES = ('#', '&')
NICKNAME_PREFIXES = (('o', '@'), ('v', '+'))
CHANNEL_MODES = ('b', 'k', 'l', 'imnpst')

CASE_MAPPINGS = {'ascii', 'rfc1459', 'strict-rfc1459'}
DEFAULT_CASE_MAPPING = 'ascii'

# Stripped from NAMES entries when no prefix table is available.
RANK_SYMBOLS = '@+%&~'

DEFAULT_TOPIC = 'No topic'
NO_TOPIC_MESSAGE = 'No topic is set'


## Message parsing.

LINE_SEPARATOR = '\r\n'
MINIMAL_LINE_SEPARATOR = '\n'

TAG_INDICATOR = '@'
TAG_SEPARATOR = ';'
TAG_VALUE_SEPARATOR = '='
SOURCE_INDICATOR = ':'
TRAILING_PREFIX = ':'
USER_SEPARATOR = '!'
HOST_SEPARATOR = '@'
SERVER_SEPARATOR = '.'

ARGUMENT_SEPARATOR = re.compile(' +', re.UNICODE)
NUMERIC_PATTERN = re.compile('^[0-9]{3}$', re.UNICODE)

CTCP_DELIMITER = '\x01'
CTCP_ESCAPE_CHAR = '\x16'
CTCP_QUOTING = {'\0': '0', '\n': 'n', '\r': 'r', CTCP_ESCAPE_CHAR: CTCP_ESCAPE_CHAR}

SECRET_CHANNEL_SIGIL = '@'
PRIVATE_CHANNEL_SIGIL = '*'
PUBLIC_CHANNEL_SIGIL = '='

FEATURE_DISABLED_PREFIX = '-'


## Numerics.

RPL_NOTOPIC = '331'
RPL_TOPIC = '332'


## Misc.

def identifierify(name):
    """ Clean up name so it works for a Python identifier. """
    name = name.lower()
    name = re.sub('[^a-z0-9]', '_', name)
    return name
