from fastecdsa.curve import secp256k1
from fastecdsa.point import Point

from group import Group

G = secp256k1.G
n = secp256k1.q
infinity = Point.IDENTITY_ELEMENT

def point_add(A, B):
    # Serializing / deserializing when sending points
    # to another process could cause a curve mismatch
    if A != infinity:
        A = Point(A.x, A.y, secp256k1)
    if B != infinity:
        B = Point(B.x, B.y, secp256k1)
    return A + B

def point_mul(A, k):
    k %= n
    if k == 0 or A == infinity:
        return infinity
    return Point(A.x, A.y, secp256k1) * k

def point_eq(A, B):
    return (A.x, A.y) == (B.x, B.y)

class Secp256k1Group(Group):
    name = 'secp256k1'
    G = G
    n = n
    infinity = infinity

    def point_add(self, A, B):
        return point_add(A, B)

    def point_mul(self, A, k):
        return point_mul(A, k)

    def point_eq(self, A, B):
        return point_eq(A, B)
