## channels.py
# Channel and channel user tracking.
import collections.abc

from . import parsing, protocol
from .models import Channel, ChannelType, User
from .modes import ModeType

__all__ = ['NoSuchChannel', 'ChannelStore', 'parse_names_entry']


class NoSuchChannel(protocol.Error):
    def __init__(self, channel):
        super().__init__('No such channel: {}'.format(channel))
        self.channel = channel


class ChannelStore(collections.abc.Mapping):
    """
    The channels we are in and who is in them.

    Stores are immutable: every operation that changes something returns a new store and leaves the one
    it was called on alone. Operations on channels we aren't tracking return the store unchanged, as
    servers happily send us messages about channels we have just left.

    Channel names are normalized according to the store's case mapping on the way in, and channels are
    iterated in ascending order of their normalized name. Nicknames are compared using the same case mapping,
    but are kept as the server sent them.
    """

    def __init__(self, channels=None, case_mapping=protocol.DEFAULT_CASE_MAPPING):
        self.case_mapping = case_mapping
        self._channels = parsing.NormalizingDict(channels or {}, case_mapping=case_mapping)

    def _evolve(self, channels):
        return self.__class__(channels, case_mapping=self.case_mapping)

    def _update_channel(self, name, update):
        """ Replace channel by update(channel), if we're tracking it. """
        channel = self._channels.get(name)
        if channel is None:
            return self

        channels = self._channels.copy()
        channels[name] = update(channel)
        return self._evolve(channels)

    def _update_users(self, name, update):
        return self._update_channel(name, lambda channel: channel._replace(users=update(channel.users)))

    def _update_all_users(self, update):
        channels = self._channels.copy()
        for key, channel in self._channels.items():
            channels[key] = channel._replace(users=update(channel.users))
        return self._evolve(channels)

    def _merge_users(self, users, new):
        roster = list(users)
        for user in new:
            for index, existing in enumerate(roster):
                if self.is_same_nick(existing.nick, user.nick):
                    # Keep what we knew, add what we learned.
                    roster[index] = existing._replace(
                        user=user.user or existing.user,
                        host=user.host or existing.host,
                        mode=existing.mode + ''.join(mode for mode in user.mode if mode not in existing.mode))
                    break
            else:
                roster.append(user)
        return tuple(roster)

    ## Helpers.

    def normalize(self, name):
        """ Normalize a channel name or nickname according to our case mapping. """
        return parsing.normalize(name, case_mapping=self.case_mapping)

    def is_same_nick(self, left, right):
        return self.normalize(left) == self.normalize(right)

    def with_case_mapping(self, case_mapping):
        """ Return a copy of this store that normalizes names using another case mapping. """
        channels = {}
        for channel in self._channels.values():
            name = parsing.normalize(channel.name, case_mapping=case_mapping)
            channels[name] = channel._replace(name=name)
        return self.__class__(channels, case_mapping=case_mapping)

    ## Own JOIN/PART.

    def join(self, name):
        """ Start tracking a channel. """
        if name in self._channels:
            return self

        channels = self._channels.copy()
        channels[name] = Channel(self.normalize(name))
        return self._evolve(channels)

    def part(self, name):
        """ Stop tracking a channel. """
        if name not in self._channels:
            return self

        channels = self._channels.copy()
        del channels[name]
        return self._evolve(channels)

    ## Channel attributes.

    def set_topic(self, name, topic):
        return self._update_channel(name, lambda channel: channel._replace(topic=topic))

    def set_type(self, name, sigil):
        """ Set channel visibility from a RPL_NAMREPLY sigil: '@' is secret, '*' private and '=' public. """
        type = ChannelType.from_sigil(sigil)
        if type is None:
            return self
        return self._update_channel(name, lambda channel: channel._replace(type=type))

    def set_modes(self, name, modes):
        """ Set the raw channel mode string, as sent in RPL_CHANNELMODEIS. """
        return self._update_channel(name, lambda channel: channel._replace(modes=modes))

    ## Users.

    def user_join(self, name, nick, user=None, host=None):
        """ Add a user to a channel. """
        entry = parse_names_entry(nick)
        if entry is None:
            return self
        entry = entry._replace(user=user or entry.user, host=host or entry.host)
        return self._update_users(name, lambda users: self._merge_users(users, [entry]))

    def users_join(self, name, nicks, prefixes=None):
        """
        Add several users to a channel, as listed in RPL_NAMREPLY.
        If prefixes, a sequence of (mode, symbol) pairs, is given, leading symbols are turned into modes.
        Otherwise the usual rank symbols are stripped and no modes are recorded.
        """
        entries = [entry for entry in (parse_names_entry(nick, prefixes) for nick in nicks) if entry]
        return self._update_users(name, lambda users: self._merge_users(users, entries))

    def user_part(self, name, nick):
        """ Remove a user from a channel. """
        return self._update_users(
            name, lambda users: tuple(user for user in users if not self.is_same_nick(user.nick, nick)))

    def user_quit(self, nick):
        """ Remove a user from every channel. """
        return self._update_all_users(
            lambda users: tuple(user for user in users if not self.is_same_nick(user.nick, nick)))

    def user_rename(self, nick, new):
        """ Rename a user in every channel they are in. """
        def rename(users):
            if not any(self.is_same_nick(user.nick, nick) for user in users):
                return users

            roster = []
            for user in users:
                if self.is_same_nick(user.nick, nick):
                    roster.append(user._replace(nick=new))
                # Whoever had the new nickname before is long gone.
                elif not self.is_same_nick(user.nick, new):
                    roster.append(user)
            return tuple(roster)

        return self._update_all_users(rename)

    def mode_update(self, name, change):
        """ Apply a status mode change to a user in a channel. Other mode changes don't affect users. """
        if change.type is not ModeType.STATUS or not change.arg:
            return self

        def update(users):
            roster = []
            for user in users:
                if self.is_same_nick(user.nick, change.arg):
                    mode = user.mode.replace(change.mode, '')
                    if change.add:
                        mode += change.mode
                    user = user._replace(mode=mode)
                roster.append(user)
            return tuple(roster)

        return self._update_users(name, update)

    ## Introspection.

    def channel(self, name):
        """ Return the tracked channel, or raise NoSuchChannel. """
        try:
            return self._channels[name]
        except KeyError:
            raise NoSuchChannel(name) from None

    def channels(self):
        """ Names of all tracked channels. """
        return list(self)

    def channel_users(self, name):
        """ Nicknames of all users in a tracked channel. """
        return self.channel(name).nicks

    def channel_user_modes(self, name):
        """ All users in a tracked channel, with their modes. """
        return list(self.channel(name).users)

    def channel_topic(self, name):
        channel = self._channels.get(name)
        if channel is None or not channel.topic:
            return protocol.DEFAULT_TOPIC
        return channel.topic

    def channel_type(self, name):
        channel = self._channels.get(name)
        if channel is None:
            return ChannelType.UNKNOWN
        return channel.type

    def channel_has_user(self, name, nick):
        return any(self.is_same_nick(user.nick, nick) for user in self.channel(name).users)

    def snapshot(self):
        """
        All channel data as a list of (name, metadata) tuples, e.g.:

            [('#testchannel', {'users': ['userA', 'userB'], 'topic': 'Just a test channel.', 'type': ChannelType.PUBLIC})]
        """
        return [(name, {'users': channel.nicks, 'topic': channel.topic, 'type': channel.type})
                for name, channel in self.items()]

    ## Mapping interface.

    def __getitem__(self, name):
        return self._channels[name]

    def __iter__(self):
        return iter(sorted(self._channels))

    def __len__(self):
        return len(self._channels)

    def __repr__(self):
        return '{cls}({channels!r}, case_mapping={cm!r})'.format(
            cls=self.__class__.__name__, channels=dict(self.items()), cm=self.case_mapping)


def parse_names_entry(entry, prefixes=None):
    """ Turn a RPL_NAMREPLY entry such as '@+nick' or 'nick!user@host' into a User, or None if there's no nick. """
    if prefixes is None:
        symbols = protocol.RANK_SYMBOLS
    else:
        symbols = ''.join(symbol for _, symbol in prefixes)

    # Make entry safe for parse_user().
    safe_entry = entry.lstrip(symbols)
    present = entry[:len(entry) - len(safe_entry)]

    nick, user, host = parsing.parse_user(safe_entry)
    if not nick:
        # nonsense nickname
        return None

    if prefixes is None:
        mode = ''
    else:
        mode = ''.join(mode for mode, symbol in prefixes if symbol in present)
    return User(nick, user, host, mode)
