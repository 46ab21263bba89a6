## parsing.py
# IRC line parsing, CTCP de-framing and case mapping.
import collections.abc
import re

from . import protocol

__all__ = ['Message', 'parse', 'parse_source', 'parse_user', 'parse_tags', 'is_ctcp', 'construct_ctcp', 'parse_ctcp',
           'normalize', 'NormalizingDict']


class Message:
    """
    A single parsed IRC line.
    Treat instances as immutable: the parser builds each one in a single go and nothing in irctrack modifies it later.
    """
    FIELDS = ('nick', 'user', 'host', 'server', 'cmd', 'ctcp', 'args', 'tags')

    def __init__(self, cmd, args=None, nick=None, user=None, host=None, server=None, ctcp=False, tags=None,
                 _raw=None):
        self.cmd = cmd
        self.args = list(args or [])
        self.nick = nick
        self.user = user
        self.host = host
        self.server = server
        self.ctcp = ctcp
        self.tags = dict(tags or {})
        self._raw = _raw

    @classmethod
    def parse(cls, line, encoding=protocol.DEFAULT_ENCODING):
        """
        Parse given line into IRC message structure.
        Never raises on malformed input: whatever cannot be extracted is left empty.
        """
        # Decode message.
        if isinstance(line, bytes):
            try:
                message = line.decode(encoding)
            except UnicodeDecodeError:
                # Try our fallback encoding.
                message = line.decode(protocol.FALLBACK_ENCODING)
        else:
            message = line

        # Strip message separator.
        if message.endswith(protocol.LINE_SEPARATOR):
            message = message[:-len(protocol.LINE_SEPARATOR)]
        elif message.endswith(protocol.MINIMAL_LINE_SEPARATOR):
            message = message[:-len(protocol.MINIMAL_LINE_SEPARATOR)]
        raw = message

        # Extract message sections.
        # Format: (@tags)? (:source)? command parameter*
        tags = {}
        if message.startswith(protocol.TAG_INDICATOR):
            raw_tags, _, message = message[len(protocol.TAG_INDICATOR):].partition(' ')
            tags = parse_tags(raw_tags)
            message = message.lstrip(' ')

        source = None
        if message.startswith(protocol.SOURCE_INDICATOR):
            source, _, message = message[len(protocol.SOURCE_INDICATOR):].partition(' ')
            message = message.lstrip(' ')
        nick, user, host, server = parse_source(source)

        parts = protocol.ARGUMENT_SEPARATOR.split(message, 1)
        command = parts[0]
        raw_params = parts[1] if len(parts) > 1 else ''

        # Extract parameters properly.
        # Format: (word|:sentence)*

        # Only parameter is a 'trailing' sentence.
        if raw_params.startswith(protocol.TRAILING_PREFIX):
            params = [raw_params[len(protocol.TRAILING_PREFIX):]]
        # We have a sentence in our parameters.
        elif ' ' + protocol.TRAILING_PREFIX in raw_params:
            index = raw_params.find(' ' + protocol.TRAILING_PREFIX)

            # Get all single-word parameters.
            params = protocol.ARGUMENT_SEPARATOR.split(raw_params[:index].rstrip(' '))
            # Extract last parameter as sentence
            params.append(raw_params[index + len(protocol.TRAILING_PREFIX) + 1:])
        # We have some parameters, but no sentences.
        elif raw_params.strip(' '):
            params = protocol.ARGUMENT_SEPARATOR.split(raw_params.strip(' '))
        # No parameters.
        else:
            params = []

        # Commands are either words, which we force to uppercase, or three-digit numerics.
        # The first parameter of a numeric is our own nickname: lift it out of the way.
        if protocol.NUMERIC_PATTERN.match(command):
            # Numerics only ever come from servers, even ones without a dot in their name.
            if nick and not user and not host:
                server = nick
            nick = params.pop(0) if params else None
        else:
            command = command.upper()

        # CTCP messages are identified by their payload rather than their command.
        ctcp = False
        if params and is_ctcp(params[-1]):
            query, contents = parse_ctcp(params[-1])
            command = query
            params[-1] = contents or ''
            ctcp = True

        # Some servers (Slack, for one) send an empty RPL_TOPIC instead of RPL_NOTOPIC.
        if command == protocol.RPL_TOPIC and params and not ctcp:
            if len(params) == 1:
                params.append(protocol.NO_TOPIC_MESSAGE)
                command = protocol.RPL_NOTOPIC
            elif not params[-1]:
                params[-1] = protocol.NO_TOPIC_MESSAGE
                command = protocol.RPL_NOTOPIC

        return cls(command, params, nick=nick, user=user, host=host, server=server, ctcp=ctcp, tags=tags,
                   _raw=raw)

    def __eq__(self, other):
        if not isinstance(other, Message):
            return NotImplemented
        return all(getattr(self, field) == getattr(other, field) for field in self.FIELDS)

    def __repr__(self):
        return '{cls}({fields})'.format(
            cls=self.__class__.__name__,
            fields=', '.join('{}={!r}'.format(field, getattr(self, field)) for field in self.FIELDS))

    def __str__(self):
        return self._raw or ''


def parse(line, encoding=protocol.DEFAULT_ENCODING):
    """ Parse a single raw IRC line into a Message. """
    return Message.parse(line, encoding=encoding)


## Prefixes.

def parse_source(raw):
    """ Parse message source into a (nick, user, host, server) tuple. Missing parts are None. """
    if not raw:
        return None, None, None, None

    # Full or partial user prefix.
    if protocol.USER_SEPARATOR in raw or protocol.HOST_SEPARATOR in raw:
        nick, user, host = parse_user(raw)
        return nick, user, host, None
    # Looks like a DNS name, so most likely a server.
    if protocol.SERVER_SEPARATOR in raw:
        return None, None, None, raw
    # Reduced prefix: just a nickname.
    return raw, None, None, None


def parse_user(raw):
    """
    Parse nick(!user)?(@host)? structure.
    Only the first '!' and the last '@' separate the parts, so usernames containing either still parse.
    A prefix without '@' whose remainder contains a dot is taken as nick!host.
    """
    nick = raw
    user = None
    host = None

    # Attempt to extract host.
    if protocol.HOST_SEPARATOR in raw:
        raw, host = raw.rsplit(protocol.HOST_SEPARATOR, 1)
        nick = raw
    # Attempt to extract user.
    if protocol.USER_SEPARATOR in raw:
        nick, user = raw.split(protocol.USER_SEPARATOR, 1)
        if host is None and protocol.SERVER_SEPARATOR in user:
            user, host = None, user

    return nick or None, user or None, host or None


def parse_tags(raw):
    """ Parse IRCv3 message tags into a dict. Valueless tags map to True. """
    tags = {}
    for raw_tag in raw.split(protocol.TAG_SEPARATOR):
        if not raw_tag:
            continue
        if protocol.TAG_VALUE_SEPARATOR in raw_tag:
            tag, value = raw_tag.split(protocol.TAG_VALUE_SEPARATOR, 1)
        else:
            tag = raw_tag
            value = True
        tags[tag] = value
    return tags


## CTCP.

CTCP_QUOTE_PATTERN = re.compile(re.escape(protocol.CTCP_ESCAPE_CHAR) + '(.)', re.DOTALL)
CTCP_UNQUOTING = {quoted: raw for raw, quoted in protocol.CTCP_QUOTING.items()}


def is_ctcp(message):
    """ Check if message follows the CTCP format. """
    return (len(message) > 1 and message.startswith(protocol.CTCP_DELIMITER)
            and message.endswith(protocol.CTCP_DELIMITER))


def construct_ctcp(*parts):
    """ Construct CTCP message. Parts that are None are left out. """
    message = ' '.join(part for part in parts if part is not None)
    message = ''.join(protocol.CTCP_ESCAPE_CHAR + protocol.CTCP_QUOTING[char] if char in protocol.CTCP_QUOTING else char
                      for char in message)
    return protocol.CTCP_DELIMITER + message + protocol.CTCP_DELIMITER


def parse_ctcp(query):
    """ Strip and de-quote CTCP messages. Returns a (command, contents) tuple; contents may be None. """
    query = query[len(protocol.CTCP_DELIMITER):-len(protocol.CTCP_DELIMITER)]
    # Unknown escapes are kept as they are.
    query = CTCP_QUOTE_PATTERN.sub(lambda match: CTCP_UNQUOTING.get(match.group(1), match.group(0)), query)
    if ' ' in query:
        command, contents = query.split(' ', 1)
        return command, contents
    return query, None


## Case mapping.

def normalize(input, case_mapping=protocol.DEFAULT_CASE_MAPPING):
    """ Normalize input according to case mapping. """
    if case_mapping not in protocol.CASE_MAPPINGS:
        raise protocol.ProtocolViolation('Unknown case mapping ({})'.format(case_mapping))

    input = input.lower()

    if case_mapping in ('rfc1459', 'strict-rfc1459'):
        input = input.replace('{', '[').replace('}', ']').replace('|', '\\')
    if case_mapping == 'rfc1459':
        input = input.replace('~', '^')

    return input


class NormalizingDict(collections.abc.MutableMapping):
    """ A dict that normalizes entries according to the given case mapping. """
    def __init__(self, *args, case_mapping):
        self.storage = {}
        self.case_mapping = case_mapping
        self.update(dict(*args))

    def __getitem__(self, key):
        if not isinstance(key, str):
            raise KeyError(key)
        return self.storage[normalize(key, case_mapping=self.case_mapping)]

    def __setitem__(self, key, value):
        if not isinstance(key, str):
            raise KeyError(key)
        self.storage[normalize(key, case_mapping=self.case_mapping)] = value

    def __delitem__(self, key):
        if not isinstance(key, str):
            raise KeyError(key)
        del self.storage[normalize(key, case_mapping=self.case_mapping)]

    def __iter__(self):
        return iter(self.storage)

    def __len__(self):
        return len(self.storage)

    def copy(self):
        return NormalizingDict(self.storage, case_mapping=self.case_mapping)

    def __repr__(self):
        return '{mod}.{cls}({dict}, case_mapping={cm})'.format(
            mod=__name__, cls=self.__class__.__name__,
            dict=self.storage, cm=self.case_mapping)
