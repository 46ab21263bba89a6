import pytest

import irctrack


@pytest.fixture
def capabilities():
    """ Capabilities as advertised by a typical InspIRCd-ish network. """
    return irctrack.CapabilityTable(
        user_prefixes=[('a', '&'), ('o', '@'), ('h', '%'), ('v', '+')],
        channel_modes=['beI', 'kLf', 'l', 'psmntirzMQNRTOVKDdGPZSCc'],
    )


@pytest.fixture
def store():
    """ A store tracking #lobby and #support, with WiZ in both. """
    return (irctrack.ChannelStore()
            .join('#lobby')
            .join('#support')
            .users_join('#lobby', ['@WiZ', 'jilles'], prefixes=[('o', '@'), ('v', '+')])
            .user_join('#support', 'WiZ'))
