# Bit masks used to pull the fields out of a 16-bit operand. The layout of
# an operand is:
#
#    Bits:  15-12     11-8      7-4       3-0
#           family     x         y        n
#
# with nn being bits 7-0 and nnn being bits 11-0.

# Selects the instruction family (bits 15-12)
FAMILY_MASK = 0xF000

# Selects the x register (bits 11-8)
X_MASK = 0x0F00

# Selects the y register (bits 7-4)
Y_MASK = 0x00F0

# Selects the low nibble (bits 3-0)
N_MASK = 0x000F

# Selects the low byte (bits 7-0)
NN_MASK = 0x00FF

# Selects the 12-bit address (bits 11-0)
NNN_MASK = 0x0FFF

# Byte and word masks for wraparound arithmetic
BYTE_MASK = 0xFF
WORD_MASK = 0xFFFF

# Bit masks for the shift instructions
LOW_BIT_MASK = 0x01
HIGH_BIT_MASK = 0x80
