#!/usr/bin/env python3
## replay.py
# Replay raw IRC lines through a session and dump the resulting channel state.
import json
import sys

from . import _args


def replay(session, lines):
    """ Feed every line to the session, skipping blank ones. """
    for line in lines:
        if not line.strip():
            continue
        session.feed(line)
    return session


def dump(session):
    """ Render the session's channel state as JSON. """
    state = {
        'nickname': session.nickname,
        'network': session.capabilities.network,
        'channels': [
            {
                'name': name,
                'topic': session.channels.channel_topic(name),
                'type': channel.type.value,
                'modes': channel.modes,
                'users': [{'nick': user.nick, 'mode': user.mode} for user in channel.users],
            }
            for name, channel in session.channels.items()
        ]
    }
    return json.dumps(state, indent=2)


def main(argv=None):
    session, args = _args.session_from_args('irctrack-replay', argv=argv,
                                            description='Replay raw IRC lines from a file or stdin, dump the tracked channel state as JSON.')
    if args.file == '-':
        replay(session, sys.stdin.buffer)
    else:
        with open(args.file, 'rb') as f:
            replay(session, f)

    print(dump(session))


if __name__ == '__main__':
    main()
