import pytest

from echo_minutes.domain.errors import InvalidTransitionError, SessionBusyError
from echo_minutes.domain.session import MeetingSession, SessionState


def test_full_recording_lifecycle():
    session = MeetingSession()
    session.begin(SessionState.RECORDING)
    for state in (SessionState.CONVERTING, SessionState.TRANSCRIBING, SessionState.COMPOSING, SessionState.DONE):
        session.transition(state)
    assert session.state == SessionState.DONE
    assert not session.busy

    # a finished session can start the next meeting
    session.begin(SessionState.CONVERTING)
    assert session.state == SessionState.CONVERTING


@pytest.mark.parametrize("busy_state", [SessionState.RECORDING, SessionState.CONVERTING])
def test_second_start_is_rejected(busy_state):
    session = MeetingSession()
    session.begin(busy_state)
    with pytest.raises(SessionBusyError):
        session.begin(SessionState.CONVERTING)
    with pytest.raises(SessionBusyError):
        session.begin(SessionState.RECORDING)


def test_fail_returns_to_idle():
    session = MeetingSession()
    session.begin(SessionState.CONVERTING)
    session.transition(SessionState.TRANSCRIBING)
    session.fail()
    assert session.state == SessionState.IDLE


def test_fail_when_idle_is_noop():
    session = MeetingSession()
    session.fail()
    assert session.state == SessionState.IDLE


def test_cancel_recording_transition():
    session = MeetingSession()
    session.begin(SessionState.RECORDING)
    session.transition(SessionState.IDLE)
    assert session.state == SessionState.IDLE


def test_invalid_transition():
    session = MeetingSession()
    with pytest.raises(InvalidTransitionError):
        session.transition(SessionState.COMPOSING)
