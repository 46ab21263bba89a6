## models.py
# User and channel records.
import collections
import enum

from . import protocol

__all__ = ['ChannelType', 'User', 'Channel']


class ChannelType(enum.Enum):
    PUBLIC = 'public'
    PRIVATE = 'private'
    SECRET = 'secret'
    UNKNOWN = 'unknown'

    @classmethod
    def from_sigil(cls, sigil):
        """ Map a RPL_NAMREPLY visibility sigil to a channel type, or None if we don't recognize it. """
        return CHANNEL_SIGILS.get(sigil)


CHANNEL_SIGILS = {
    protocol.SECRET_CHANNEL_SIGIL: ChannelType.SECRET,
    protocol.PRIVATE_CHANNEL_SIGIL: ChannelType.PRIVATE,
    protocol.PUBLIC_CHANNEL_SIGIL: ChannelType.PUBLIC,
}


class User(collections.namedtuple('User', ('nick', 'user', 'host', 'mode'), defaults=(None, None, ''))):
    """ A user as seen in one channel. mode holds the status mode letters they have there. """
    __slots__ = ()

    @property
    def name(self):
        return self.nick

    @property
    def hostmask(self):
        return '{n}!{u}@{h}'.format(n=self.nick, u=self.user or '*', h=self.host or '*')


class Channel(collections.namedtuple('Channel', ('name', 'topic', 'type', 'modes', 'users'),
                                     defaults=(None, ChannelType.UNKNOWN, '', ()))):
    """ A tracked channel. users is a tuple of User in the order they were first seen. """
    __slots__ = ()

    @property
    def nicks(self):
        return [user.nick for user in self.users]
