#
# Split data codewords into Reed-Solomon blocks, compute the error
# correction codewords and interleave everything into the final stream.
#

from . import rsblock
from .bitbuffer import bitbuffer
from .galois import generator, polynomial


#
def calc_ecc_block(data : bytes, ecc_codewords : int) -> bytearray:
    """Remainder of data * x**n divided by the generator of degree n."""
    gen = generator.get_by_ecc_codewords(ecc_codewords)
    rem = polynomial(data, len(gen) - 1).mod(gen)

    # right align, the remainder may have lost leading zero terms
    ecc = bytearray(ecc_codewords)
    offset = ecc_codewords - len(rem)

    for n in range(len(rem)):
        ecc[offset+n] = rem[n]

    return ecc


#
def calc_code_ecc_arrays(data : bytes, blocks : list):
    """Divide the data codewords into blocks and compute ECC for each.

        Parameters:
        -----------
        data : bytes
            All data codewords, already padded to capacity.
        blocks : list of rsblock
            Block plan of the version and level.

        Return:
        -------
            (cwds, ewds) lists of bytearray, one entry per block.
    """
    cwds = []
    ewds = []
    offset = 0

    for block in blocks:
        cwd = bytearray(data[offset:offset+block.data_codewords])
        offset += block.data_codewords

        cwds.append(cwd)
        ewds.append(calc_ecc_block(cwd, block.ecc_codewords))

    return cwds, ewds


#
def interleave_code_ecc_arrays(cwds : list, ewds : list) -> bytearray:
    dst = bytearray()

    # data
    for col in range(max(len(cwd) for cwd in cwds)):
        for cwd in cwds:
            if (col < len(cwd)):
                dst.append(cwd[col])

    # ecc
    for col in range(max(len(ewd) for ewd in ewds)):
        for ewd in ewds:
            if (col < len(ewd)):
                dst.append(ewd[col])

    return dst


#
def create_codewords(buffer : bitbuffer, version : int, level : str) -> bytearray:
    blocks = rsblock.get_rs_blocks(version, level)
    total = sum(block.data_codewords for block in blocks)
    data = bytes(buffer.byte_at(n) for n in range(total))

    cwds, ewds = calc_code_ecc_arrays(data, blocks)
    return interleave_code_ecc_arrays(cwds, ewds)
