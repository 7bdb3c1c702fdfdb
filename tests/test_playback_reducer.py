"""
Playback Reducer Tests

Pure (status, event) -> transition behaviour, with no media element involved.
"""

import math

import pytest

from core.media_element import MediaEvent, MediaLoadError, MediaNotification, MediaPlaybackError
from core.playback_reducer import (
    LOAD_ERROR_MESSAGE,
    PLAYBACK_ERROR_MESSAGE,
    BindTrack,
    Effect,
    EffectKind,
    PauseCommand,
    PlayCommand,
    Reconcile,
    SeekCommand,
    VolumeCommand,
    reduce,
)
from models.playback_status import PlaybackPhase, PlaybackStatus
from models.track import Track

TRACK = Track(id="t1", url="/music/one.mp3", title="One")


def status(**kwargs):
    kwargs.setdefault("track", TRACK)
    return PlaybackStatus(**kwargs)


def notify(kind, value=None, error=None):
    return MediaEvent(kind, value, error)


class TestBind:
    """Binding a track"""

    def test_bind_resets_to_idle_and_loads(self):
        previous = status(
            phase=PlaybackPhase.ERRORED,
            duration_seconds=90.0,
            current_time_seconds=30.0,
            error_message=PLAYBACK_ERROR_MESSAGE,
            play_intent=True,
        )
        other = Track(id="t2", url="/music/two.mp3")

        transition = reduce(previous, BindTrack(other, 0.5))

        assert transition.status == PlaybackStatus(
            phase=PlaybackPhase.IDLE, track=other, volume=0.5
        )
        assert transition.effects == (Effect(EffectKind.LOAD_SOURCE),)

    def test_bind_none_unloads(self):
        transition = reduce(status(phase=PlaybackPhase.PLAYING), BindTrack(None))

        assert transition.status.track is None
        assert transition.status.phase == PlaybackPhase.IDLE
        assert transition.effects == (Effect(EffectKind.UNLOAD),)


class TestNotifications:
    """Media notifications are authoritative"""

    def test_load_start_enters_loading(self):
        result = reduce(status(), notify(MediaNotification.LOAD_START)).status
        assert result.phase == PlaybackPhase.LOADING

    def test_can_play_moves_loading_to_ready(self):
        result = reduce(status(phase=PlaybackPhase.LOADING), notify(MediaNotification.CAN_PLAY)).status
        assert result.phase == PlaybackPhase.READY

    def test_can_play_does_not_leave_playing(self):
        before = status(phase=PlaybackPhase.PLAYING, duration_seconds=60.0)
        assert reduce(before, notify(MediaNotification.CAN_PLAY)).status is before

    def test_metadata_sets_duration(self):
        result = reduce(
            status(phase=PlaybackPhase.LOADING), notify(MediaNotification.METADATA_READY, 95.0)
        ).status
        assert result.phase == PlaybackPhase.READY
        assert result.duration_seconds == 95.0

    @pytest.mark.parametrize("value", [math.nan, math.inf, -3.0, None])
    def test_unknown_duration_counts_as_zero(self, value):
        result = reduce(
            status(phase=PlaybackPhase.LOADING), notify(MediaNotification.METADATA_READY, value)
        ).status
        assert result.duration_seconds == 0.0
        assert result.progress_fraction == 0.0

    def test_time_update_confirms_play_intent(self):
        before = status(phase=PlaybackPhase.READY, duration_seconds=60.0, play_intent=True)
        result = reduce(before, notify(MediaNotification.TIME_UPDATE, 1.5)).status
        assert result.phase == PlaybackPhase.PLAYING
        assert result.play_intent is False
        assert result.current_time_seconds == 1.5

    def test_time_update_without_intent_keeps_phase(self):
        before = status(phase=PlaybackPhase.PAUSED, duration_seconds=60.0)
        result = reduce(before, notify(MediaNotification.TIME_UPDATE, 12.0)).status
        assert result.phase == PlaybackPhase.PAUSED
        assert result.current_time_seconds == 12.0

    def test_time_update_is_clamped_to_duration(self):
        before = status(phase=PlaybackPhase.PLAYING, duration_seconds=60.0)
        result = reduce(before, notify(MediaNotification.TIME_UPDATE, 75.0)).status
        assert result.current_time_seconds == 60.0
        assert result.progress_fraction == 1.0

    def test_unchanged_time_update_returns_same_status(self):
        before = status(phase=PlaybackPhase.PLAYING, duration_seconds=60.0, current_time_seconds=5.0)
        assert reduce(before, notify(MediaNotification.TIME_UPDATE, 5.0)).status is before

    def test_ended_moves_to_end(self):
        before = status(phase=PlaybackPhase.PLAYING, duration_seconds=60.0, current_time_seconds=59.7)
        result = reduce(before, notify(MediaNotification.ENDED)).status
        assert result.phase == PlaybackPhase.ENDED
        assert result.current_time_seconds == 60.0

    def test_error_before_playback_is_load_error(self):
        result = reduce(status(phase=PlaybackPhase.LOADING), notify(MediaNotification.ERROR)).status
        assert result.phase == PlaybackPhase.ERRORED
        assert result.error_message == LOAD_ERROR_MESSAGE

    def test_error_during_playback_is_playback_error(self):
        before = status(phase=PlaybackPhase.PLAYING, duration_seconds=60.0, current_time_seconds=10.0)
        result = reduce(before, notify(MediaNotification.ERROR)).status
        assert result.error_message == PLAYBACK_ERROR_MESSAGE

    def test_error_payload_decides_classification(self):
        before = status(phase=PlaybackPhase.PLAYING, duration_seconds=60.0, current_time_seconds=10.0)
        loaded = reduce(before, notify(MediaNotification.ERROR, error=MediaLoadError("gone"))).status
        assert loaded.error_message == LOAD_ERROR_MESSAGE

        ready = status(phase=PlaybackPhase.READY)
        played = reduce(ready, notify(MediaNotification.ERROR, error=MediaPlaybackError("x"))).status
        assert played.error_message == PLAYBACK_ERROR_MESSAGE

    def test_errored_ignores_notifications(self):
        before = status(phase=PlaybackPhase.ERRORED, error_message=LOAD_ERROR_MESSAGE)
        for kind in MediaNotification:
            assert reduce(before, notify(kind, 3.0)).status is before

    def test_unbound_ignores_notifications(self):
        before = PlaybackStatus()
        assert reduce(before, notify(MediaNotification.CAN_PLAY)).status is before


class TestPlayPause:
    """Optimistic commands"""

    def test_play_from_ready_sets_intent(self):
        transition = reduce(status(phase=PlaybackPhase.READY, duration_seconds=60.0), PlayCommand())
        assert transition.status.phase == PlaybackPhase.READY
        assert transition.status.play_intent is True
        assert transition.effects == (Effect(EffectKind.REQUEST_PLAY),)

    def test_play_while_loading_is_accepted(self):
        transition = reduce(status(phase=PlaybackPhase.LOADING), PlayCommand())
        assert transition.status.play_intent is True
        assert transition.effects == (Effect(EffectKind.REQUEST_PLAY),)

    def test_play_after_end_restarts(self):
        before = status(phase=PlaybackPhase.ENDED, duration_seconds=60.0, current_time_seconds=60.0)
        transition = reduce(before, PlayCommand())
        assert transition.status.current_time_seconds == 0.0
        assert transition.effects == (
            Effect(EffectKind.SET_POSITION, 0.0),
            Effect(EffectKind.REQUEST_PLAY),
        )

    @pytest.mark.parametrize("phase", [PlaybackPhase.PLAYING, PlaybackPhase.ERRORED])
    def test_play_is_noop(self, phase):
        before = status(phase=phase, duration_seconds=60.0)
        transition = reduce(before, PlayCommand())
        assert transition.status is before
        assert transition.is_noop

    def test_play_without_track_is_noop(self):
        assert reduce(PlaybackStatus(), PlayCommand()).is_noop

    def test_repeated_play_issues_one_request(self):
        first = reduce(status(phase=PlaybackPhase.READY), PlayCommand())
        second = reduce(first.status, PlayCommand())
        assert second.is_noop

    def test_pause_while_playing(self):
        before = status(phase=PlaybackPhase.PLAYING, duration_seconds=60.0, current_time_seconds=4.0)
        transition = reduce(before, PauseCommand())
        assert transition.status.phase == PlaybackPhase.PAUSED
        assert transition.status.current_time_seconds == 4.0
        assert transition.effects == (Effect(EffectKind.REQUEST_PAUSE),)

    def test_pause_cancels_pending_play(self):
        before = status(phase=PlaybackPhase.READY, play_intent=True)
        transition = reduce(before, PauseCommand())
        assert transition.status.phase == PlaybackPhase.READY
        assert transition.status.play_intent is False
        assert transition.effects == (Effect(EffectKind.REQUEST_PAUSE),)

    @pytest.mark.parametrize("phase", [PlaybackPhase.READY, PlaybackPhase.PAUSED, PlaybackPhase.ENDED])
    def test_pause_when_not_playing_is_noop(self, phase):
        before = status(phase=phase)
        assert reduce(before, PauseCommand()).status is before


class TestSeek:
    """Seeking"""

    def test_seek_updates_time_immediately(self):
        before = status(phase=PlaybackPhase.PLAYING, duration_seconds=100.0, current_time_seconds=10.0)
        transition = reduce(before, SeekCommand(40.0))
        assert transition.status.current_time_seconds == 40.0
        assert transition.status.phase == PlaybackPhase.PLAYING
        assert transition.effects == (Effect(EffectKind.SET_POSITION, 40.0),)

    def test_seek_is_clamped(self):
        before = status(phase=PlaybackPhase.PAUSED, duration_seconds=100.0)
        assert reduce(before, SeekCommand(250.0)).status.current_time_seconds == 100.0
        assert reduce(before, SeekCommand(-5.0)).status.current_time_seconds == 0.0

    def test_seek_without_duration_is_ignored(self):
        before = status(phase=PlaybackPhase.LOADING)
        assert reduce(before, SeekCommand(10.0)).is_noop

    def test_seek_nan_is_ignored(self):
        before = status(phase=PlaybackPhase.PAUSED, duration_seconds=100.0)
        assert reduce(before, SeekCommand(math.nan)).is_noop

    def test_seek_when_errored_is_ignored(self):
        before = status(phase=PlaybackPhase.ERRORED, duration_seconds=100.0)
        assert reduce(before, SeekCommand(10.0)).is_noop

    def test_seek_after_end_pauses(self):
        before = status(phase=PlaybackPhase.ENDED, duration_seconds=100.0, current_time_seconds=100.0)
        result = reduce(before, SeekCommand(30.0)).status
        assert result.phase == PlaybackPhase.PAUSED
        assert result.current_time_seconds == 30.0


class TestVolumeAndReconcile:

    def test_volume_is_clamped(self):
        transition = reduce(status(), VolumeCommand(1.7))
        assert transition.status.volume == 1.0
        assert transition.effects == (Effect(EffectKind.SET_VOLUME, 1.0),)

    def test_reconcile_reads_element_values(self):
        before = status(phase=PlaybackPhase.PLAYING)
        result = reduce(before, Reconcile(80.0, 20.0)).status
        assert result.duration_seconds == 80.0
        assert result.current_time_seconds == 20.0

    def test_reconcile_keeps_known_duration_when_element_reports_nan(self):
        before = status(phase=PlaybackPhase.PLAYING, duration_seconds=80.0, current_time_seconds=3.0)
        result = reduce(before, Reconcile(math.nan, 5.0)).status
        assert result.duration_seconds == 80.0
        assert result.current_time_seconds == 5.0

    def test_unknown_event_raises(self):
        with pytest.raises(TypeError):
            reduce(status(), object())
