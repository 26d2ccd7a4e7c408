import logging

logger = logging.getLogger(__name__)


def read_rom(filename):
    """
    Read a ROM image from disk.

    :param filename: the name of the file to load
    :return: the bytes of the file
    """
    with open(filename, 'rb') as rom_file:
        return rom_file.read()


def load_rom(machine, filename):
    """
    Load the ROM indicated by the filename into the program region of the
    machine's memory.

    :param machine: a freshly constructed Machine
    :param filename: the name of the file to load
    :raises CapacityExceededException: if the ROM does not fit
    :return: the number of bytes loaded
    """
    rom = read_rom(filename)
    machine.load(rom)
    logger.info("Loaded %s (%d bytes)", filename, len(rom))
    return len(rom)
