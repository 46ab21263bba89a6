## isupport.py
# ISUPPORT (server-side IRC extension indication) support.
# See: http://tools.ietf.org/html/draft-hardy-irc-isupport-00
import copy
import logging

from . import protocol

__all__ = ['CapabilityTable', 'isup']

logger = logging.getLogger(__name__)

CHANMODES_CATEGORIES = 4


class CapabilityTable:
    """
    What the server told us about its channel and nickname prefixes, mode categories and network.
    Real networks spread RPL_ISUPPORT over several lines, so every key only ever updates its own field.
    """

    def __init__(self, channel_prefixes=protocol.CHANNEL_PREFIXES, user_prefixes=protocol.NICKNAME_PREFIXES,
                 channel_modes=protocol.CHANNEL_MODES, network=None, case_mapping=protocol.DEFAULT_CASE_MAPPING):
        self.channel_prefixes = tuple(channel_prefixes)
        self.user_prefixes = tuple(tuple(pair) for pair in user_prefixes)
        self.channel_modes = pad_categories(channel_modes)
        self.network = network
        self.case_mapping = case_mapping

    def copy(self):
        return copy.copy(self)

    def __eq__(self, other):
        if not isinstance(other, CapabilityTable):
            return NotImplemented
        return vars(self) == vars(other)

    def __repr__(self):
        return '{cls}({attrs})'.format(
            cls=self.__class__.__name__,
            attrs=', '.join('{}={!r}'.format(k, v) for k, v in vars(self).items()))

    ## ISUPPORT handlers.

    def on_isupport_casemapping(self, value):
        """ IRC case mapping for nickname and channel name comparisons. """
        if value in protocol.CASE_MAPPINGS:
            self.case_mapping = value

    def on_isupport_chanmodes(self, value):
        """ Valid channel modes and their behaviour. """
        self.channel_modes = pad_categories((value or '').split(','))

    def on_isupport_chantypes(self, value):
        """ Channel name prefix symbols. """
        if not value:
            value = ''
        self.channel_prefixes = tuple(value)

    def on_isupport_network(self, value):
        """ IRC network name. """
        self.network = value

    def on_isupport_prefix(self, value):
        """ Nickname prefixes on channels and their associated modes. """
        if not value:
            # No prefixes support.
            self.user_prefixes = ()
            return

        if not value.startswith('(') or ')' not in value:
            raise ValueError('Malformed PREFIX value: {}'.format(value))
        modes, prefixes = value[1:].split(')', 1)
        self.user_prefixes = tuple(zip(modes, prefixes))


def pad_categories(groups):
    """ Force mode category groups into exactly four strings, A through D. """
    groups = list(groups)[:CHANMODES_CATEGORIES]
    return tuple(groups + [''] * (CHANMODES_CATEGORIES - len(groups)))


def isup(args, table=None):
    """
    Apply the tokens of an RPL_ISUPPORT reply to a capability table and return the updated copy.
    Tokens we don't know about, including the trailing 'are supported by this server', are ignored.
    """
    table = table.copy() if table is not None else CapabilityTable()

    for feature in args:
        if not feature or feature.startswith(protocol.FEATURE_DISABLED_PREFIX):
            continue
        if '=' in feature:
            feature, value = feature.split('=', 1)
        else:
            value = None

        method = getattr(table, 'on_isupport_' + protocol.identifierify(feature), None)
        if method is None:
            continue
        try:
            method(value)
        except ValueError:
            logger.warning('Ignoring malformed ISUPPORT token: %s=%s', feature, value)

    return table
