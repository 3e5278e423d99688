import random


class RecordingPlayback:
    """PlaybackPort test double that records every command."""

    def __init__(self, duration=180.0):
        self.duration = duration
        self.playing = False
        self.calls = []

    def load(self, track, *, autoplay, volume):
        self.calls.append(("load", track, autoplay))
        self.playing = bool(autoplay)
        return self.duration

    def play_pause(self):
        self.playing = not self.playing
        self.calls.append(("play_pause", self.playing))
        return self.playing

    def seek(self, time_seconds):
        self.calls.append(("seek", time_seconds))

    def set_volume(self, volume):
        self.calls.append(("set_volume", volume))

    def stop(self):
        self.playing = False
        self.calls.append(("stop",))

    def fade_out_and_stop(self, duration_seconds):
        self.calls.append(("fade_out_and_stop", duration_seconds))

    def resume(self):
        self.playing = True
        self.calls.append(("resume",))

    def current_playback_time(self):
        return 0.0

    def commands(self, name):
        return [call for call in self.calls if call[0] == name]


class FixedBubbleRandom(random.Random):
    """Always spawns in one lane with one bubble size; everything else stays seeded."""

    def __init__(self, *, lane=0, size=64.0, seed=0):
        super().__init__(seed)
        self._lane = lane
        self._size = size

    def randrange(self, *args, **kwargs):
        return self._lane

    def uniform(self, a, b):
        return self._size
