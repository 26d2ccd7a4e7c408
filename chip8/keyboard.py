import logging

import pygame
from pygame import key

from chip8.machine import NUM_KEYS

logger = logging.getLogger(__name__)

# Sets which keys on the keyboard map to the Chip 8 keys
KEY_MAPPINGS = {
    0x0: pygame.K_KP0,
    0x1: pygame.K_KP1,
    0x2: pygame.K_KP2,
    0x3: pygame.K_KP3,
    0x4: pygame.K_KP4,
    0x5: pygame.K_KP5,
    0x6: pygame.K_KP6,
    0x7: pygame.K_KP7,
    0x8: pygame.K_KP8,
    0x9: pygame.K_KP9,
    0xA: pygame.K_a,
    0xB: pygame.K_b,
    0xC: pygame.K_c,
    0xD: pygame.K_d,
    0xE: pygame.K_e,
    0xF: pygame.K_f,
}

# The key that stops the emulator
QUIT_KEY = pygame.K_q

# What the host loop should do after checking the keyboard
COMMAND_CONTINUE = 'continue'
COMMAND_QUIT = 'quit'


def read_keypad(keys_pressed, key_mappings=KEY_MAPPINGS):
    """
    Translate the state of the physical keyboard into the 16 keypad latches.

    :param keys_pressed: anything indexable by pygame key constants that
        returns a truthy value for held keys (e.g. pygame.key.get_pressed())
    :param key_mappings: the keypad index to pygame key mapping
    :return: a list of 16 booleans, one per keypad key
    """
    return [bool(keys_pressed[key_mappings[key_index]]) for key_index in range(NUM_KEYS)]


class Keyboard(object):
    """
    Reads the pygame event queue and keyboard state, and writes the result
    into the machine's keypad before each step.
    """
    def __init__(self, key_mappings=KEY_MAPPINGS, quit_key=QUIT_KEY):
        self.key_mappings = key_mappings
        self.quit_key = quit_key

    def check(self, machine):
        """
        Drain pending events and latch every keypad key on the machine.

        :param machine: the Machine whose keypad is written
        :return: COMMAND_QUIT if the window was closed or the quit key was
            pressed, COMMAND_CONTINUE otherwise
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logger.info("Window closed")
                return COMMAND_QUIT
            if event.type == pygame.KEYDOWN and event.key == self.quit_key:
                logger.info("Quit key pressed")
                return COMMAND_QUIT

        for key_index, pressed in enumerate(read_keypad(key.get_pressed(), self.key_mappings)):
            machine.set_key(key_index, pressed)
        return COMMAND_CONTINUE
