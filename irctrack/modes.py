## modes.py
# Channel mode change interpretation.
import collections
import enum
import logging

from .isupport import CapabilityTable

__all__ = ['ModeType', 'ModeChange', 'parse_chanmode']

logger = logging.getLogger(__name__)


class ModeType(enum.Enum):
    """ How a channel mode letter behaves, named after the RPL_ISUPPORT CHANMODES categories. """
    LIST = 'A'
    PARAMETER = 'B'
    PARAMETER_ON_SET = 'C'
    NO_PARAMETER = 'D'
    STATUS = 'U'

    def takes_argument(self, add):
        """ Whether a change of this type consumes an argument. """
        if self is ModeType.PARAMETER_ON_SET:
            return add
        return self is not ModeType.NO_PARAMETER


CATEGORIES = (ModeType.LIST, ModeType.PARAMETER, ModeType.PARAMETER_ON_SET, ModeType.NO_PARAMETER)

ModeChange = collections.namedtuple('ModeChange', ('add', 'mode', 'type', 'arg'), defaults=(None,))
ModeChange.__doc__ = """ A single classified mode change. arg is None unless the mode type takes one in this direction. """


def classify(mode, table):
    """ Find the behaviour of a mode letter. Letters we know nothing about are assumed to have no parameters. """
    for status, _ in table.user_prefixes:
        if mode == status:
            return ModeType.STATUS
    for type, affected in zip(CATEGORIES, table.channel_modes):
        if mode in affected:
            return type
    return ModeType.NO_PARAMETER


def parse_chanmode(params, table=None):
    """
    Parse a channel mode change into a list of ModeChanges, in the order the letters appear.
    params is [channel, delta, argument...], exactly as found in a MODE message or RPL_CHANNELMODEIS.
    """
    if table is None:
        table = CapabilityTable()
    if len(params) < 2:
        return []

    delta = params[1]
    arguments = collections.deque(params[2:])
    changes = []
    add = True

    for mode in delta:
        # Set mode to addition or deletion of modes.
        if mode == '+':
            add = True
            continue
        if mode == '-':
            add = False
            continue

        type = classify(mode, table)
        arg = None
        if type.takes_argument(add):
            if arguments:
                arg = arguments.popleft()
            else:
                logger.warning('Mode %s%s on %s requires a parameter, but none are left.',
                               '+' if add else '-', mode, params[0])
        changes.append(ModeChange(add, mode, type, arg))

    return changes
