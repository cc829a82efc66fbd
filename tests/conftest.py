import pytest

from virtuoso.clock import ManualDriver
from virtuoso.models import ScheduledNote, Song
from virtuoso.session import Session


class RecordingAudio:
    def __init__(self):
        self.played = []

    def play_note(self, frequency, duration=0.5):
        self.played.append(frequency)


@pytest.fixture
def driver():
    return ManualDriver()


@pytest.fixture
def audio():
    return RecordingAudio()


@pytest.fixture
def single_note_song():
    """One C4 at 1000ms lasting 500ms."""
    return Song(title="Single", notes=[ScheduledNote(id="1", note_name="C4", start_time=1000, duration=500)])


@pytest.fixture
def make_session(driver):
    def _make(song=None, **kwargs):
        return Session(song, driver=driver, time_source=driver.now, **kwargs)
    return _make
