import pytest

from irctrack.channels import ChannelStore, NoSuchChannel, parse_names_entry
from irctrack.models import Channel, ChannelType, User
from irctrack.modes import ModeChange, ModeType

PREFIXES = [('o', '@'), ('h', '%'), ('v', '+')]


def test_channel_join():
    store = ChannelStore().join('#lobby')
    assert '#lobby' in store
    assert store['#lobby'] == Channel('#lobby')
    assert store.channel_users('#lobby') == []


def test_channel_join_twice():
    store = ChannelStore().join('#lobby')
    assert store.join('#lobby') is store
    assert store.join('#LOBBY') is store
    assert len(store.join('#lobby')) == 1


def test_channel_join_part_roundtrip():
    before = ChannelStore().join('#support')
    after = before.join('#lobby').part('#lobby')
    assert after == before
    assert after.channels() == ['#support']


def test_channel_part_untracked():
    store = ChannelStore().join('#lobby')
    assert store.part('#support') is store


def test_channel_operations_leave_store_alone():
    store = ChannelStore()
    joined = store.join('#lobby')
    assert '#lobby' not in store
    assert joined.set_topic('#lobby', 'Hi') is not joined
    assert joined.channel_topic('#lobby') == 'No topic'


def test_channel_names_are_normalized():
    store = ChannelStore().join('#Lobby')
    assert store.channels() == ['#lobby']
    assert store['#LOBBY'].name == '#lobby'
    assert store.normalize('#LoBBy') == '#lobby'


def test_channel_rfc1459_case_mapping():
    store = ChannelStore(case_mapping='rfc1459').join('#Foo[]')
    assert '#foo{}' in store
    assert store.channels() == ['#foo[]']


def test_channel_with_case_mapping():
    store = ChannelStore().join('#foo{}').with_case_mapping('rfc1459')
    assert store.case_mapping == 'rfc1459'
    assert store.channels() == ['#foo[]']
    assert store['#FOO[]'].name == '#foo[]'


def test_channels_ordering():
    store = ChannelStore().join('#support').join('#lobby').join('&local')
    assert store.channels() == ['#lobby', '#support', '&local']
    assert list(store) == store.channels()
    assert [name for name, _ in store.snapshot()] == store.channels()


def test_channel_topic():
    store = ChannelStore().join('#lobby').set_topic('#LOBBY', 'Welcome!')
    assert store.channel_topic('#lobby') == 'Welcome!'
    assert store.set_topic('#lobby', None).channel_topic('#lobby') == 'No topic'
    assert store.set_topic('#lobby', '').channel_topic('#lobby') == 'No topic'


def test_channel_topic_untracked():
    store = ChannelStore()
    assert store.set_topic('#lobby', 'Welcome!') is store
    assert store.channel_topic('#lobby') == 'No topic'


def test_channel_type():
    store = ChannelStore().join('#lobby')
    assert store.channel_type('#lobby') == ChannelType.UNKNOWN
    assert store.set_type('#lobby', '@').channel_type('#lobby') == ChannelType.SECRET
    assert store.set_type('#lobby', '*').channel_type('#lobby') == ChannelType.PRIVATE
    assert store.set_type('#lobby', '=').channel_type('#lobby') == ChannelType.PUBLIC


def test_channel_type_unknown_sigil():
    store = ChannelStore().join('#lobby').set_type('#lobby', '=')
    assert store.set_type('#lobby', '!') is store


def test_channel_type_untracked():
    store = ChannelStore()
    assert store.set_type('#lobby', '@') is store
    assert store.channel_type('#lobby') == ChannelType.UNKNOWN


def test_channel_modes():
    store = ChannelStore().join('#lobby').set_modes('#lobby', '+ntl 25')
    assert store['#lobby'].modes == '+ntl 25'


def test_users_join_without_prefixes():
    store = ChannelStore().join('#lobby').users_join('#lobby', ['@WiZ', '+jilles', '%half', '&admin', '~owner', 'plain'])
    assert store.channel_users('#lobby') == ['WiZ', 'jilles', 'half', 'admin', 'owner', 'plain']
    assert all(user.mode == '' for user in store.channel_user_modes('#lobby'))


def test_users_join_with_prefixes():
    store = ChannelStore().join('#lobby').users_join('#lobby', ['@WiZ', '+jilles', '@+both', 'plain'], prefixes=PREFIXES)
    assert store.channel_user_modes('#lobby') == [
        User('WiZ', mode='o'),
        User('jilles', mode='v'),
        User('both', mode='ov'),
        User('plain'),
    ]


def test_users_join_unknown_prefix_stays():
    store = ChannelStore().join('#lobby').users_join('#lobby', ['~owner'], prefixes=PREFIXES)
    assert store.channel_users('#lobby') == ['~owner']


def test_users_join_userhost_in_names():
    store = ChannelStore().join('#lobby').users_join('#lobby', ['@WiZ!jto@tolsun.oulu.fi'], prefixes=PREFIXES)
    assert store.channel_user_modes('#lobby') == [User('WiZ', 'jto', 'tolsun.oulu.fi', 'o')]
    assert store['#lobby'].users[0].hostmask == 'WiZ!jto@tolsun.oulu.fi'


def test_users_join_deduplicates():
    store = ChannelStore().join('#lobby')
    store = store.users_join('#lobby', ['WiZ', 'jilles', 'WiZ'])
    store = store.user_join('#lobby', 'jilles')
    assert store.channel_users('#lobby') == ['WiZ', 'jilles']


def test_users_join_merges():
    store = ChannelStore().join('#lobby').user_join('#lobby', 'WiZ', user='jto', host='tolsun.oulu.fi')
    store = store.users_join('#lobby', ['jilles', '@wiz'], prefixes=PREFIXES)
    assert store.channel_user_modes('#lobby') == [User('WiZ', 'jto', 'tolsun.oulu.fi', 'o'), User('jilles')]


def test_users_join_untracked():
    store = ChannelStore()
    assert store.user_join('#lobby', 'WiZ') is store
    assert store.users_join('#lobby', ['WiZ']) is store
    assert '#lobby' not in store


def test_user_part(store):
    store = store.user_part('#lobby', 'WiZ')
    assert store.channel_users('#lobby') == ['jilles']
    assert store.channel_users('#support') == ['WiZ']


def test_user_part_case_insensitive(store):
    assert not store.user_part('#lobby', 'wiz').channel_has_user('#lobby', 'WiZ')


def test_user_quit(store):
    store = store.user_quit('WiZ')
    assert store.channel_users('#lobby') == ['jilles']
    assert store.channel_users('#support') == []


def test_user_quit_absent(store):
    store = store.user_quit('jilles')
    assert store.channel_users('#lobby') == ['WiZ']
    assert store.channel_users('#support') == ['WiZ']


def test_user_rename(store):
    store = store.user_rename('WiZ', 'Kilroy')
    assert store.channel_users('#lobby') == ['Kilroy', 'jilles']
    assert store.channel_users('#support') == ['Kilroy']
    # Modes move along with the user.
    assert store.channel_user_modes('#lobby')[0] == User('Kilroy', mode='o')


def test_user_rename_collision(store):
    store = store.user_rename('jilles', 'WiZ')
    assert store.channel_user_modes('#lobby') == [User('WiZ')]
    # WiZ was not renamed away in #support, so they stay.
    assert store.channel_users('#support') == ['WiZ']


def test_user_rename_case_change(store):
    store = store.user_rename('WiZ', 'wiz')
    assert store.channel_users('#lobby') == ['wiz', 'jilles']


def test_mode_update_add():
    store = ChannelStore().join('#lobby').user_join('#lobby', 'WiZ')
    change = ModeChange(True, 'o', ModeType.STATUS, 'WiZ')

    once = store.mode_update('#lobby', change)
    twice = once.mode_update('#lobby', change)
    assert once.channel_user_modes('#lobby') == [User('WiZ', mode='o')]
    assert twice.channel_user_modes('#lobby') == [User('WiZ', mode='o')]

    both = twice.mode_update('#lobby', ModeChange(True, 'v', ModeType.STATUS, 'WiZ'))
    assert both.channel_user_modes('#lobby') == [User('WiZ', mode='ov')]


def test_mode_update_remove(store):
    store = store.mode_update('#lobby', ModeChange(False, 'o', ModeType.STATUS, 'WiZ'))
    assert store.channel_user_modes('#lobby')[0] == User('WiZ')

    # Removing a mode the user doesn't have is harmless.
    assert store.mode_update('#lobby', ModeChange(False, 'v', ModeType.STATUS, 'WiZ')) == store


def test_mode_update_ignores_channel_modes(store):
    assert store.mode_update('#lobby', ModeChange(True, 'b', ModeType.LIST, '*!*@*')) is store
    assert store.mode_update('#lobby', ModeChange(True, 'i', ModeType.NO_PARAMETER)) is store


def test_mode_update_untracked(store):
    assert store.mode_update('#nowhere', ModeChange(True, 'o', ModeType.STATUS, 'WiZ')) is store


def test_mode_update_unknown_user(store):
    assert store.mode_update('#lobby', ModeChange(True, 'o', ModeType.STATUS, 'nobody')) == store


def test_introspection_untracked():
    store = ChannelStore()
    with pytest.raises(NoSuchChannel):
        store.channel_users('#lobby')
    with pytest.raises(NoSuchChannel):
        store.channel_user_modes('#lobby')
    with pytest.raises(NoSuchChannel) as excinfo:
        store.channel_has_user('#lobby', 'WiZ')
    assert excinfo.value.channel == '#lobby'


def test_channel_has_user(store):
    assert store.channel_has_user('#lobby', 'WiZ')
    assert store.channel_has_user('#LOBBY', 'wiz')
    assert not store.channel_has_user('#support', 'jilles')


def test_snapshot(store):
    store = store.set_topic('#lobby', 'Welcome!').set_type('#lobby', '=')
    assert store.snapshot() == [
        ('#lobby', {'users': ['WiZ', 'jilles'], 'topic': 'Welcome!', 'type': ChannelType.PUBLIC}),
        ('#support', {'users': ['WiZ'], 'topic': None, 'type': ChannelType.UNKNOWN}),
    ]


def test_parse_names_entry():
    assert parse_names_entry('@+WiZ', PREFIXES) == User('WiZ', mode='ov')
    assert parse_names_entry('@+WiZ') == User('WiZ')
    assert parse_names_entry('@') is None
