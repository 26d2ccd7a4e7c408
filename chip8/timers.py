# The rate at which the delay and sound timers count down
TIMER_FREQUENCY = 60

# The default number of instructions executed per second of emulated time
DEFAULT_CLOCK_SPEED = 540


class TimerClock(object):
    """
    Keeps the 60 Hz timers in step with emulated time rather than with the
    number of instructions executed. Every instruction is worth
    1 / clock_speed seconds; every 1 / timer_frequency seconds that pass
    produce one timer tick. The bookkeeping is done with integers so that the
    same program always ticks on the same instructions:

        clock_speed = 540, timer_frequency = 60  ->  1 tick every 9 steps
        clock_speed = 60,  timer_frequency = 60  ->  1 tick every step
        clock_speed = 30,  timer_frequency = 60  ->  2 ticks every step
    """
    def __init__(self, clock_speed=DEFAULT_CLOCK_SPEED, timer_frequency=TIMER_FREQUENCY):
        """
        :param clock_speed: instructions executed per second
        :param timer_frequency: timer ticks per second
        """
        if clock_speed <= 0:
            raise ValueError("clock speed must be positive, got {}".format(clock_speed))
        if timer_frequency <= 0:
            raise ValueError("timer frequency must be positive, got {}".format(timer_frequency))
        self.clock_speed = clock_speed
        self.timer_frequency = timer_frequency
        self.accumulator = 0

    def advance(self):
        """
        Account for one executed instruction.

        :return: the number of timer ticks that are now due
        """
        self.accumulator += self.timer_frequency
        ticks, self.accumulator = divmod(self.accumulator, self.clock_speed)
        return ticks

    def reset(self):
        self.accumulator = 0
