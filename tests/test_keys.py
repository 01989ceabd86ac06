from jee_timer.keys import (
    REFRESH_TOKEN_USER,
    SERVICE_NAME,
    clear_refresh_token,
    load_refresh_token,
    redact,
    save_refresh_token,
)


def test_refresh_token_round_trip(memory_keyring):
    assert load_refresh_token() is None
    assert save_refresh_token("token-123456") is True
    assert memory_keyring.get_password(SERVICE_NAME, REFRESH_TOKEN_USER) == "token-123456"
    assert load_refresh_token() == "token-123456"
    clear_refresh_token()
    assert load_refresh_token() is None


def test_clearing_when_nothing_stored_is_quiet():
    clear_refresh_token()
    assert load_refresh_token() is None


def test_redact():
    assert redact(None) == "<none>"
    assert redact("abc") == "***"
    assert redact("abcdefghij") == "abc***hij"
