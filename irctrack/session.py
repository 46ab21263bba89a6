## session.py
# Per-connection state tracking.
import logging

from . import parsing, protocol
from .channels import ChannelStore
from .isupport import CapabilityTable, isup
from .modes import parse_chanmode

__all__ = ['Session']


class Session:
    """
    Tracks the state of a single IRC connection: what the server supports, which channels we are in and who is in them.
    Feed it every line the server sends, in order, from a single loop.

    Subclasses can override the on_* callbacks to be told about changes as they are applied.
    """
    DEFAULT_NICKNAME = '<unregistered>'

    def __init__(self, nickname=None, capabilities=None, channels=None, encoding=protocol.DEFAULT_ENCODING):
        self.nickname = nickname or self.DEFAULT_NICKNAME
        self.encoding = encoding
        self.capabilities = capabilities if capabilities is not None else CapabilityTable()
        if channels is None:
            channels = ChannelStore(case_mapping=self.capabilities.case_mapping)
        self.channels = channels
        self.logger = logging.getLogger(__name__)

    ## IRC helpers.

    def normalize(self, input):
        return parsing.normalize(input, case_mapping=self.capabilities.case_mapping)

    def is_channel(self, chan):
        """ Check if given argument is a channel name or not. """
        return any(chan.startswith(prefix) for prefix in self.capabilities.channel_prefixes)

    def in_channel(self, channel):
        """ Check if we are currently in the given channel. """
        return channel in self.channels

    def is_same_nick(self, left, right):
        """ Check if given nicknames are equal in the server's case mapping. """
        return self.normalize(left) == self.normalize(right)

    ## Message dispatch.

    def feed(self, line):
        """ Parse a single line, update our state accordingly and return the parsed message. """
        message = parsing.parse(line, encoding=self.encoding)
        self.on_raw(message)
        return message

    def on_raw(self, message):
        """ Handle a single message. """
        self.logger.debug('<< %s', message._raw)

        if message.ctcp:
            # Any user can send these: they never reach the server command handlers.
            method = 'on_ctcp'
            handler = self._dispatch_ctcp
        else:
            method = 'on_raw_' + message.cmd.lower()
            handler = getattr(self, method, self.on_unknown)
        try:
            handler(message)
        except Exception:
            self.logger.exception('Failed to execute %s handler.', method)

    def on_unknown(self, message):
        """ Unknown command. Most commands don't affect channel state, so this is nothing to worry about. """
        self.logger.debug('Unhandled command: %s %s', message.cmd, message.args)

    def _dispatch_ctcp(self, message):
        target = message.args[0] if len(message.args) > 1 else None
        contents = (message.args[-1] or None) if message.args else None

        # Find dedicated handler if it exists.
        attr = 'on_ctcp_' + protocol.identifierify(message.cmd)
        if hasattr(self, attr):
            getattr(self, attr)(message.nick, target, contents)
        # Invoke global handler.
        self.on_ctcp(message.nick, target, message.cmd, contents)

    ## Overloadable callbacks.

    def on_join(self, channel, user):
        """ Callback called when a user, possibly the client, has joined the channel. """
        pass

    def on_part(self, channel, user, message=None):
        """ Callback called when a user, possibly the client, left a channel. """
        pass

    def on_kick(self, channel, target, by, reason=None):
        """ Callback called when a user, possibly the client, was kicked from a channel. """
        pass

    def on_quit(self, user, message=None):
        """ Callback called when a user, possibly the client, left the network. """
        pass

    def on_nick_change(self, old, new):
        """ Callback called when a user, possibly the client, changed their nickname. """
        pass

    def on_topic_change(self, channel, message, by):
        """ Callback called when the topic for a channel was changed. """
        pass

    def on_mode_change(self, channel, changes, by):
        """ Callback called when the mode on a channel was changed. changes is a list of ModeChange. """
        pass

    def on_ctcp(self, by, target, what, contents):
        """
        Callback called when a CTCP query or reply was received.
        Subclasses can override on_ctcp_<type> to be called for that specific CTCP type, in addition to this callback.
        """
        pass

    ## Command handlers.

    def on_raw_join(self, message):
        """ JOIN command. """
        nick = message.nick
        channels = message.args[0].split(',')

        for channel in channels:
            if self.is_same_nick(self.nickname, nick):
                # We joined here: start tracking.
                self.channels = self.channels.join(channel)
            self.channels = self.channels.user_join(channel, nick, user=message.user, host=message.host)
            self.on_join(channel, nick)

    def on_raw_kick(self, message):
        """ KICK command. """
        channel, target = message.args[:2]
        reason = message.args[2] if len(message.args) > 2 else None

        if self.is_same_nick(self.nickname, target):
            self.channels = self.channels.part(channel)
        else:
            self.channels = self.channels.user_part(channel, target)
        self.on_kick(channel, target, message.nick, reason)

    def on_raw_mode(self, message):
        """ MODE command. User mode changes don't touch channel state. """
        target = message.args[0]
        if not self.is_channel(target):
            return

        changes = parse_chanmode(message.args, self.capabilities)
        for change in changes:
            self.channels = self.channels.mode_update(target, change)
        self.on_mode_change(target, changes, message.nick or message.server)

    def on_raw_nick(self, message):
        """ NICK command. """
        nick = message.nick
        new = message.args[0]

        # Acknowledgement of nickname change: set it internally, too.
        if self.is_same_nick(self.nickname, nick):
            self.nickname = new

        self.channels = self.channels.user_rename(nick, new)
        self.on_nick_change(nick, new)

    def on_raw_part(self, message):
        """ PART command. """
        nick = message.nick
        channels = message.args[0].split(',')
        reason = message.args[1] if len(message.args) > 1 else None

        for channel in channels:
            if self.is_same_nick(self.nickname, nick):
                # We left the channel. Stop tracking.
                self.channels = self.channels.part(channel)
            else:
                self.channels = self.channels.user_part(channel, nick)
            self.on_part(channel, nick, reason)

    def on_raw_quit(self, message):
        """ QUIT command. """
        reason = message.args[0] if message.args else None

        self.channels = self.channels.user_quit(message.nick)
        self.on_quit(message.nick, reason)

    def on_raw_topic(self, message):
        """ TOPIC command. """
        channel, topic = message.args[:2]

        self.channels = self.channels.set_topic(channel, topic)
        self.on_topic_change(channel, topic, message.nick)

    ## Numeric responses.

    def on_raw_001(self, message):
        """ Welcome message. The numeric's target is the nickname we actually ended up with. """
        if message.nick:
            self.nickname = message.nick

    def on_raw_005(self, message):
        """ ISUPPORT indication. """
        capabilities = isup(message.args, self.capabilities)

        if capabilities.case_mapping != self.capabilities.case_mapping:
            self.channels = self.channels.with_case_mapping(capabilities.case_mapping)
        if capabilities.network and capabilities.network != self.capabilities.network:
            self.logger = logging.getLogger(self.__class__.__name__ + ':' + capabilities.network)

        self.capabilities = capabilities

    def on_raw_324(self, message):
        """ Channel mode. """
        channel = message.args[0]
        self.channels = self.channels.set_modes(channel, ' '.join(message.args[1:]))

    def on_raw_331(self, message):
        """ No topic set on channel join. """
        self.channels = self.channels.set_topic(message.args[0], None)

    def on_raw_332(self, message):
        """ Current topic on channel join. """
        channel, topic = message.args[:2]
        self.channels = self.channels.set_topic(channel, topic)

    def on_raw_353(self, message):
        """ Response to /NAMES. """
        if len(message.args) > 2:
            visibility, channel, names = message.args[:3]
            self.channels = self.channels.set_type(channel, visibility)
        else:
            # RFC 1459 servers leave out the visibility sigil.
            channel, names = message.args[:2]

        self.channels = self.channels.users_join(channel, names.split(), prefixes=self.capabilities.user_prefixes)
