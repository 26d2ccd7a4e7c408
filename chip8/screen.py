import numpy
from pygame import display, surfarray, transform, Color, HWSURFACE, DOUBLEBUF

from chip8.machine import SCREEN_HEIGHT, SCREEN_WIDTH

SCREEN_NAME = 'CHIP8 Emulator'

# The default scale factor applied to the 64 x 32 display
DEFAULT_SCALE = 10

# The depth of the screen is the number of bits used to represent the color
# of a pixel.
SCREEN_DEPTH = 32

# The colors of the pixels to draw. The Chip 8 supports two colors: 0 (off)
# and 1 (on). The format of the colors is in RGBA format.
PIXEL_COLORS = {
    0: Color(0, 0, 0, 255),
    1: Color(250, 250, 250, 255)
}


def frame_to_rgb(pixels):
    """
    Convert a framebuffer snapshot into an RGB array laid out the way
    pygame.surfarray expects it, indexed [x, y, channel].

    :param pixels: a boolean array of shape (SCREEN_HEIGHT, SCREEN_WIDTH)
    :return: a uint8 array of shape (SCREEN_WIDTH, SCREEN_HEIGHT, 3)
    """
    off = numpy.array(tuple(PIXEL_COLORS[0])[:3], dtype=numpy.uint8)
    on = numpy.array(tuple(PIXEL_COLORS[1])[:3], dtype=numpy.uint8)
    return numpy.where(numpy.asarray(pixels).T[..., numpy.newaxis], on, off)


class Screen(object):
    """
    A window showing the Chip 8 display. The original Chip 8 screen was
    64 x 32 with 2 colors. In this emulator, this translates to color 0 (off)
    and color 1 (on). The screen keeps no pixel state of its own; it only
    paints framebuffer snapshots handed to it by the host loop.
    """
    def __init__(self, ratio=DEFAULT_SCALE, screen_height=SCREEN_HEIGHT,
                 screen_width=SCREEN_WIDTH):
        """
        Initializes the main screen. The scale factor is used to modify
        the size of the main screen, since the original resolution of the
        Chip 8 was 64 x 32, which is quite small.

        :param ratio: the scaling factor to apply to the screen
        :param screen_height: the height of the screen
        :param screen_width: the width of the screen
        """
        self.screen_height = screen_height
        self.screen_width = screen_width
        self.scaling_ratio = ratio
        self.screen_surface = None

    def init_display(self):
        """
        Attempts to initialize a screen with the specified height and width.
        The screen will by default be of depth SCREEN_DEPTH, and will be
        double-buffered in hardware (if possible).
        """
        display.init()
        self.screen_surface = display.set_mode(
            ((self.screen_width * self.scaling_ratio),
             (self.screen_height * self.scaling_ratio)),
            HWSURFACE | DOUBLEBUF,
            SCREEN_DEPTH)
        display.set_caption(SCREEN_NAME)
        self.clear_screen()
        display.flip()

    def set_caption(self, caption):
        display.set_caption('{} - {}'.format(SCREEN_NAME, caption))

    def draw_frame(self, pixels):
        """
        Paint a whole framebuffer snapshot and flip it to the display. The
        64 x 32 image is scaled up to the window size.

        :param pixels: a boolean array of shape (SCREEN_HEIGHT, SCREEN_WIDTH)
        """
        frame_surface = surfarray.make_surface(frame_to_rgb(pixels))
        transform.scale(frame_surface, self.screen_surface.get_size(), self.screen_surface)
        self.update_screen()

    def clear_screen(self):
        """
        Turns off all the pixels on the screen (writes color 0 to all pixels).
        """
        self.screen_surface.fill(PIXEL_COLORS[0])

    @staticmethod
    def update_screen():
        """
        Updates the display by swapping the back buffer and screen buffer.
        According to the pygame documentation, the flip should wait for a
        vertical retrace when both HWSURFACE and DOUBLEBUF are set on the
        surface.
        """
        display.flip()

    @staticmethod
    def close():
        display.quit()
