from . import protocol, parsing, isupport, modes, models, channels, session

from .protocol import Error, ProtocolViolation
from .parsing import Message, parse
from .isupport import CapabilityTable, isup
from .modes import ModeType, ModeChange, parse_chanmode
from .models import ChannelType, User, Channel
from .channels import NoSuchChannel, ChannelStore
from .session import Session

__name__ = 'irctrack'
__version__ = '0.1.0'
__version_info__ = (0, 1, 0)
__license__ = 'BSD'
