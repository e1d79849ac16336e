from shamir import random_scalar, to_scalar

def int_from_bytes(b: bytes) -> int:
    return int.from_bytes(b, byteorder="big")

class Group:
    """A prime-order group together with its scalar field.

    Subclasses set G (generator), n (group order) and infinity (identity)
    and implement point_add / point_mul. Scalars are plain ints mod n.
    """

    name = None
    G = None
    n = None
    infinity = None

    def point_add(self, A, B):
        raise NotImplementedError

    def point_mul(self, A, k):
        raise NotImplementedError

    def point_eq(self, A, B):
        return A == B

    def commit(self, k):
        return self.point_mul(self.G, k)

    def scalar_from_int(self, x: int) -> int:
        return to_scalar(x, self.n)

    def scalar_from_bytes(self, b: bytes) -> int:
        return int_from_bytes(b) % self.n

    def random_scalar(self, rng=None) -> int:
        return random_scalar(self.n, rng)

    def __eq__(self, other):
        return type(self) is type(other)

    def __hash__(self):
        return hash(type(self))

    def __repr__(self):
        return f'{type(self).__name__}()'
