import argparse
import logging
import random
import sys

import pygame

from chip8 import __version__
from chip8.audio import BEEP_DURATION, Beeper
from chip8.cpu import CPU
from chip8.exception import CapacityExceededException, Chip8Exception
from chip8.keyboard import COMMAND_QUIT, Keyboard
from chip8.loader import load_rom
from chip8.machine import Machine
from chip8.screen import DEFAULT_SCALE, Screen
from chip8.timers import DEFAULT_CLOCK_SPEED

logger = logging.getLogger(__name__)

# The number of times per second the host renders and reads the keyboard
FRAME_RATE = 60

LOG_FORMAT = "[%(levelname)s]:  %(message)s"


def steps_per_frame(clock_speed, frame_rate=FRAME_RATE):
    """
    The number of instructions to run between two frames so that the CPU
    executes roughly clock_speed instructions per second.
    """
    return max(1, int(round(clock_speed / float(frame_rate))))


def screen_cpu_connector(args):
    """
    Runs the main emulator loop with the specified arguments.

    :param args: the parsed command-line arguments
    :return: the process exit status
    """
    machine = Machine()
    try:
        load_rom(machine, args.rom)
    except (CapacityExceededException, IOError) as error:
        logger.error("Cannot load %s: %s", args.rom, error)
        return 1

    rng = random.Random(args.seed)
    project_cpu = CPU(machine, clock_speed=args.clock, rng=rng)

    project_screen = Screen(ratio=args.scale)
    project_screen.init_display()
    project_screen.set_caption(args.rom)
    keyboard = Keyboard()
    beeper = None if args.mute else Beeper(duration=BEEP_DURATION)
    frame_clock = pygame.time.Clock()
    batch = steps_per_frame(args.clock)
    status = 0

    logger.info("Running at %d instructions per second", args.clock)
    try:
        while keyboard.check(machine) != COMMAND_QUIT:
            for _ in range(batch):
                project_cpu.step()

                # Make sound if needed; the flag only lasts for one step
                if beeper is not None:
                    beeper.set_beep(machine.sound)

            # Render the frame if needed
            if machine.redraw:
                logger.debug("\n%s", project_cpu)
                machine.redraw = False
                project_screen.draw_frame(machine.snapshot_framebuffer())

            frame_clock.tick(FRAME_RATE)
    except Chip8Exception as error:
        logger.error("Machine halted: %s", error)
        logger.error("\n%s", project_cpu)
        status = 1
    finally:
        if beeper is not None:
            beeper.close()
        project_screen.close()
    return status


def build_parser():
    parser = argparse.ArgumentParser(
        description="Starts a simple Chip 8 emulator")
    parser.add_argument(
        "rom", help="the ROM file to load on startup")
    parser.add_argument(
        "-s", "--scale", help="the scale factor to apply to the display "
                              "(default is {})".format(DEFAULT_SCALE),
        type=int, default=DEFAULT_SCALE, dest="scale")
    parser.add_argument(
        "-c", "--clock", help="the number of instructions to execute per "
                              "second (default is {})".format(DEFAULT_CLOCK_SPEED),
        type=int, default=DEFAULT_CLOCK_SPEED, dest="clock")
    parser.add_argument(
        "--seed", help="seed for the random number instruction, for "
                       "reproducible runs", type=int, default=None)
    parser.add_argument(
        "-m", "--mute", help="do not open an audio device",
        action="store_true")
    parser.add_argument(
        "-v", "--verbose", help="log every frame and machine state",
        action="store_true")
    parser.add_argument(
        "--version", action="version", version="%(prog)s {}".format(__version__))
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    if args.clock <= 0:
        build_parser().error("the clock speed must be positive")
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT, stream=sys.stdout)
    return screen_cpu_connector(args)


if __name__ == "__main__":
    sys.exit(main())
