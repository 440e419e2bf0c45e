"""Keeps the highlighted tutorial step in step with video playback.

Two tolerances are in play and they are deliberately different:

* ``AUTO_SWITCH_TOLERANCE`` (2s) decides *when to switch*: on every playback
  sample the steps are scanned in order and the first one within the window
  becomes active.
* ``ACTIVE_DISPLAY_TOLERANCE`` (3s) decides *whether a step is shown as
  active*: the active step always is, and any other step is when playback is
  within the wider window of its timestamp.
"""
import logging
from typing import Optional, Protocol, Sequence
from app.core.config import ACTIVE_DISPLAY_TOLERANCE, AUTO_SWITCH_TOLERANCE
from app.models.job import Step
from app.timecode import format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)


class MediaPlayer(Protocol):
    """The bits of a video element the synchronizer drives."""

    @property
    def paused(self) -> bool: ...

    def seek(self, seconds: float) -> None: ...

    def play(self) -> None: ...

    def pause(self) -> None: ...


class PlaybackSynchronizer:
    def __init__(
        self,
        steps: Sequence[Step],
        player: Optional[MediaPlayer] = None,
        auto_switch_tolerance: float = AUTO_SWITCH_TOLERANCE,
        active_display_tolerance: float = ACTIVE_DISPLAY_TOLERANCE,
    ):
        self.steps = sorted(steps, key=lambda step: step.id)
        self.player = player
        self.auto_switch_tolerance = auto_switch_tolerance
        self.active_display_tolerance = active_display_tolerance
        self.current_time = 0.0
        self.is_playing = False
        self.explicit = False
        # seconds are parsed once; samples arrive many times a second
        self._offsets = {step.id: parse_timestamp(step.timestamp) for step in self.steps}
        self._active_id: Optional[int] = self.steps[0].id if self.steps else None

    @property
    def active_step(self) -> Optional[Step]:
        if self._active_id is None:
            return None
        return self._step(self._active_id)

    @property
    def current_time_label(self) -> str:
        return format_timestamp(self.current_time, pad_minutes=False)

    def _step(self, step_id: int) -> Step:
        for step in self.steps:
            if step.id == step_id:
                return step
        raise KeyError(f"No step {step_id}")

    def select_step(self, step_id: int) -> float:
        """Seek to a step, start playback and mark it as chosen by the user."""
        step = self._step(step_id)
        seconds = float(self._offsets[step.id])
        logger.debug(f"Clicked step {step.id} at {step.timestamp}, jumping to {seconds} seconds")
        if self.player is not None:
            self.player.seek(seconds)
            try:
                self.player.play()
                self.is_playing = True
            except Exception as e:
                # browsers may refuse autoplay; the seek still stands
                logger.info(f"Auto-play prevented: {e}")
        self.current_time = seconds
        self._active_id = step.id
        self.explicit = True
        return seconds

    def on_time_update(self, seconds: float) -> Optional[Step]:
        """Record a playback sample and switch the active step if one matches."""
        self.current_time = seconds
        for step in self.steps:
            if abs(seconds - self._offsets[step.id]) < self.auto_switch_tolerance:
                if self._active_id != step.id:
                    logger.debug(f"Auto-highlighting step {step.id} at {seconds:.2f}s")
                    self._active_id = step.id
                    self.explicit = False
                break
        return self.active_step

    def is_step_active(self, step: Step) -> bool:
        """Whether ``step`` should be rendered as the current one."""
        if self._active_id is None:
            return False
        if step.id == self._active_id:
            return True
        return abs(self.current_time - self._offsets.get(step.id, parse_timestamp(step.timestamp))) < self.active_display_tolerance

    def active_steps(self) -> list:
        return [step for step in self.steps if self.is_step_active(step)]

    def toggle_playback(self) -> bool:
        """Play when paused, pause when playing. Returns the new playing state."""
        if self.player is None:
            return self.is_playing
        if self.player.paused:
            self.player.play()
            self.is_playing = True
        else:
            self.player.pause()
            self.is_playing = False
        return self.is_playing

    def on_play(self) -> None:
        self.is_playing = True

    def on_pause(self) -> None:
        self.is_playing = False
