#
# Append only bit sink. Bits are stored MSB first in a bytearray.
#

class bitbuffer(object):
    def __init__(self):
        # bytearray zeroes each new index by default
        self.buffer = bytearray()
        self.length = 0

    #
    def put(self, value : int, length : int):
        """Append the length least significant bits of value, MSB first."""
        for n in range(length):
            self.put_bit(((value >> (length - n - 1)) & 1) == 1)

    #
    def put_bit(self, bit : bool):
        index = self.length // 8

        if (len(self.buffer) <= index):
            self.buffer.append(0)

        if (bit):
            self.buffer[index] |= 0x80 >> (self.length % 8)

        self.length += 1

    #
    def get_bit(self, index : int) -> bool:
        if (index < 0 or index >= self.length):
            raise IndexError(f"Bit index {index} out of range")

        return ((self.buffer[index // 8] >> (7 - index % 8)) & 1) == 1

    #
    def byte_at(self, index : int) -> int:
        # a byte not yet completed has its missing bits as zero
        if (index < 0 or index >= len(self.buffer)):
            raise IndexError(f"Byte index {index} out of range")

        return self.buffer[index]

    #
    def length_in_bits(self) -> int:
        return self.length

    #
    def get_buffer(self) -> bytes:
        return bytes(self.buffer)

    def __len__(self):
        return self.length
