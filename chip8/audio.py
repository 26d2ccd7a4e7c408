import logging
import time

import numpy
import pygame

logger = logging.getLogger(__name__)

# Output format for the mixer
SAMPLE_RATE = 44100
SAMPLE_SIZE = -16
CHANNELS = 1

# The tone played while the sound timer fires
TONE_HZ = 440
VOLUME = 0.25

# How long a beep is held after the last time it was requested, in seconds.
# The sound flag is only raised for a single step, which is far too short to
# hear on its own.
BEEP_DURATION = 0.25


def square_wave(frequency=TONE_HZ, volume=VOLUME, sample_rate=SAMPLE_RATE):
    """
    Build one second of a square wave as signed 16-bit samples.

    :param frequency: the pitch of the tone in Hz
    :param volume: the amplitude as a fraction of full scale
    :param sample_rate: samples per second
    :return: a 1-D int16 numpy array of sample_rate samples
    """
    phase = (numpy.arange(sample_rate) * frequency / float(sample_rate)) % 1.0
    amplitude = int(volume * numpy.iinfo(numpy.int16).max)
    return numpy.where(phase < 0.5, amplitude, -amplitude).astype(numpy.int16)


class Beeper(object):
    """
    Plays a tone when the machine raises its sound flag. Once started the
    tone keeps playing for at least BEEP_DURATION after the last request.
    """
    def __init__(self, duration=BEEP_DURATION, sound=None, clock=time.monotonic):
        """
        :param duration: the minimum time to hold a beep, in seconds
        :param sound: an object with play(loops) and stop() methods; when
            omitted the mixer is initialised and a square wave is built
        :param clock: returns the current time in seconds
        """
        self.duration = duration
        self.clock = clock
        self.sound = sound if sound is not None else self.init_sound()
        self.playing = False
        self.start = 0.0

    @staticmethod
    def init_sound():
        pygame.mixer.init(SAMPLE_RATE, SAMPLE_SIZE, CHANNELS)
        logger.debug("Mixer initialised: %s", pygame.mixer.get_init())
        return pygame.sndarray.make_sound(square_wave())

    def set_beep(self, enable):
        """
        Starts the beep if necessary, and stops the beep if the beep duration
        has passed.

        :param enable: the machine's sound flag for the last step
        """
        now = self.clock()
        if enable:
            self.start = now
            if not self.playing:
                self.sound.play(loops=-1)
                self.playing = True
        elif self.playing and now - self.start >= self.duration:
            self.sound.stop()
            self.playing = False

    def close(self):
        if self.playing:
            self.sound.stop()
            self.playing = False
