from .mocks import MockSession


def with_session(*lines, nickname='TestcaseRunner', cls=MockSession, **options):
    """ Run the test with a session that has already been fed the given lines. """
    def inner(f):
        def run():
            session = cls(nickname, **options)
            for line in lines:
                session.feed(line)
            return f(session=session)

        run.__name__ = f.__name__
        return run
    return inner
