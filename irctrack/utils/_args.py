# Common argument parsing code.
import argparse
import logging
import irctrack


def session_from_args(name, description, default_nick=None, cls=irctrack.Session, argv=None):
    # Parse some arguments.
    parser = argparse.ArgumentParser(name, description=description, add_help=False,
        epilog='This program is part of {package}.'.format(package=irctrack.__name__))

    meta = parser.add_argument_group('Meta')
    meta.add_argument('-h', '--help', action='help', help='What you are reading right now.')
    meta.add_argument('-v', '--version', action='version', version='{package}/%(prog)s {ver}'.format(package=irctrack.__name__, ver=irctrack.__version__), help='Dump version number.')
    meta.add_argument('-V', '--verbose', help='Be verbose in warnings and errors.', action='store_true', default=False)
    meta.add_argument('-d', '--debug', help='Show debug output.', action='store_true', default=False)

    init = parser.add_argument_group('Session')
    init.add_argument('file', help='File with one raw IRC line per line. (default: stdin)', nargs='?', default='-', metavar='FILE')
    init.add_argument('-n', '--nickname', help='Our own nickname, until the server confirms one. (default: {})'.format(default_nick or cls.DEFAULT_NICKNAME), default=default_nick, metavar='NICK')
    init.add_argument('-e', '--encoding', help='Line encoding. (default: UTF-8)', default=irctrack.protocol.DEFAULT_ENCODING, metavar='ENCODING')

    args = parser.parse_args(argv)

    # Set log level.
    if args.debug:
        log_level = logging.DEBUG
    elif args.verbose:
        log_level = logging.WARNING
    else:
        log_level = logging.ERROR

    logging.basicConfig(level=log_level)

    # Setup session.
    session = cls(nickname=args.nickname, encoding=args.encoding)
    return session, args
