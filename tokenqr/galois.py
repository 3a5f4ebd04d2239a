#
# (c) 2023 Jouni Korhonen
#
# GF(256) arithmetic and polynomials used by the Reed-Solomon coder.
#

from .errors import FieldDomainError


def build_tables_():
    # x^8 + x^4 + x^3 + x^2 + 1
    ex_to_gf = bytearray(256)

    for n in range(8):
        ex_to_gf[n] = 1 << n

    for n in range(8, 256):
        ex_to_gf[n] = ex_to_gf[n-4] ^ ex_to_gf[n-5] ^ ex_to_gf[n-6] ^ ex_to_gf[n-8]

    gf_to_ex = bytearray(256)

    for n in range(255):
        gf_to_ex[ex_to_gf[n]] = n

    return bytes(ex_to_gf), bytes(gf_to_ex)


class galois_field_256(object):
    """
    There are excellent articles about Galois Fields:
    https://en.wikipedia.org/wiki/Finite_field
    https://www.thonky.com/qr-code-tutorial/error-correction-coding

    The tables are shared by every user of the class and never modified.
    """
    ex_to_gf, gf_to_ex = build_tables_()

    #
    @staticmethod
    def exp(n : int) -> int:
        return galois_field_256.ex_to_gf[n % 255]

    #
    @staticmethod
    def log(n : int) -> int:
        if (n < 1 or n > 255):
            raise FieldDomainError(f"log({n}) is undefined in GF(256)")

        return galois_field_256.gf_to_ex[n]

    #
    @staticmethod
    def add_sub(a : int, b : int) -> int:
        return a ^ b

    #
    @staticmethod
    def mul(a : int, b : int) -> int:
        if (a == 0 or b == 0):
            return 0

        return galois_field_256.exp(galois_field_256.log(a) + galois_field_256.log(b))

    #
    @staticmethod
    def div(a : int, b : int) -> int:
        if (a == 0):
            return 0

        return galois_field_256.exp(galois_field_256.log(a) - galois_field_256.log(b))


class polynomial(object):
    """
    Polynomial over GF(256) stored as a list of coefficients, the highest
    order term first.

    Parameters:
    -----------
    num : sequence of int
        Coefficients. Leading zeros are dropped.
    shift : int
        Number of zero coefficients appended, i.e. the polynomial is
        multiplied by x**shift.
    """
    def __init__(self, num, shift : int=0):
        offset = 0

        while (offset < len(num) and num[offset] == 0):
            offset += 1

        self.num = list(num[offset:]) + [0] * shift

    def __len__(self):
        return len(self.num)

    def __getitem__(self, index):
        return self.num[index]

    def __eq__(self, other):
        if (not isinstance(other, polynomial)):
            return NotImplemented

        return self.num == other.num

    def __repr__(self):
        return f"polynomial({self.num})"

    #
    def multiply(self, other : "polynomial") -> "polynomial":
        num = [0] * (len(self) + len(other) - 1)

        for i in range(len(self)):
            for j in range(len(other)):
                num[i+j] ^= galois_field_256.mul(self.num[i], other.num[j])

        return polynomial(num)

    #
    def mod(self, other : "polynomial") -> "polynomial":
        """Remainder of the division by other.

            Long division done one leading term at a time. Subtraction in
            GF(256) is XOR.
        """
        num = list(self.num)
        gf = galois_field_256

        while (len(num) >= len(other)):
            if (num[0] == 0):
                del num[0]
                continue

            ratio = gf.log(num[0]) - gf.log(other.num[0])

            for i in range(len(other)):
                if (other.num[i] != 0):
                    num[i] ^= gf.exp(gf.log(other.num[i]) + ratio)

            while (len(num) > 0 and num[0] == 0):
                del num[0]

        return polynomial(num)


class generator(object):
    """
    The generator polynomial is created by multiplying
    together (x - a**0) through (x - a**(n-1)), where
    n is the number of error codewords to be generated
    and a = 2

    For more information see:
    https://www.thonky.com/qr-code-tutorial/how-create-generator-polynomial
    """
    generators_ = {}

    @staticmethod
    def get_by_ecc_codewords(ecw : int) -> polynomial:
        if (ecw < 1):
            raise ValueError(f"Unsupported generator size {ecw}")

        if (ecw not in generator.generators_):
            gen = polynomial([1])

            for n in range(ecw):
                gen = gen.multiply(polynomial([1, galois_field_256.exp(n)]))

            generator.generators_[ecw] = gen

        return generator.generators_[ecw]
