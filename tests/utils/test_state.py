import re

import pytest

from picker_auth.utils._state import generate_state, validate_state


def test_state_is_url_safe_and_long_enough():
    state = generate_state()

    # 32 bytes of entropy, base64url without padding
    assert len(state) == 43
    assert re.match(r"^[A-Za-z0-9_-]+$", state)


def test_states_are_unique():
    states = {generate_state() for _ in range(1000)}

    assert len(states) == 1000


def test_matching_states_validate():
    state = generate_state()

    assert validate_state(state, state) is True
    assert validate_state("abc", "abc") is True


@pytest.mark.parametrize(
    ("expected", "received"),
    [
        (None, None),
        ("", ""),
        ("abc", None),
        (None, "abc"),
        ("abc", ""),
        ("", "abc"),
        ("abc", "abd"),
        ("abc", "ABC"),
        ("abc", "abc "),
        ("abc", "é"),
        ("é", "è"),
    ],
)
def test_invalid_states(expected, received):
    assert validate_state(expected, received) is False


def test_state_from_another_attempt_does_not_validate():
    assert validate_state(generate_state(), generate_state()) is False


def test_matching_non_ascii_states_validate():
    assert validate_state("état", "état") is True
