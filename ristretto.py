"""
Ristretto255 group backend.

Group operations go through libsodium (>= 1.0.18) via ctypes. Points are
kept as their 32-byte canonical encodings, scalars as ints mod L and
encoded little-endian when handed to libsodium.
"""

import ctypes
import ctypes.util
import logging

from group import Group

L = 2**252 + 27742317777372353535851937790883648493
SCALAR_BYTES = 32
POINT_BYTES = 32

# Canonical encoding of the identity element
IDENTITY = b"\x00" * POINT_BYTES

_U8 = ctypes.c_ubyte
_U8P = ctypes.POINTER(_U8)

_LIBSODIUM_NAMES = [
    "libsodium.so",
    "libsodium.so.23",
    "libsodium.so.26",
    "libsodium.dylib",
    "libsodium.dll",
    "libsodium-23.dll",
]

_sodium = None

def _load_libsodium():
    candidates = []
    found = ctypes.util.find_library("sodium")
    if found:
        candidates.append(found)
    candidates.extend(_LIBSODIUM_NAMES)

    last_err = None
    for name in candidates:
        try:
            lib = ctypes.CDLL(name)
        except OSError as e:
            last_err = e
            continue
        if not hasattr(lib, "crypto_core_ristretto255_add"):
            continue
        lib.sodium_init.restype = ctypes.c_int
        lib.sodium_init.argtypes = []
        if lib.sodium_init() < 0:
            raise RuntimeError(f'sodium_init failed for {name}')

        # int crypto_core_ristretto255_add(unsigned char *r, const unsigned char *p, const unsigned char *q);
        lib.crypto_core_ristretto255_add.restype = ctypes.c_int
        lib.crypto_core_ristretto255_add.argtypes = [_U8P, _U8P, _U8P]
        # int crypto_scalarmult_ristretto255(unsigned char *q, const unsigned char *n, const unsigned char *p);
        lib.crypto_scalarmult_ristretto255.restype = ctypes.c_int
        lib.crypto_scalarmult_ristretto255.argtypes = [_U8P, _U8P, _U8P]
        # int crypto_scalarmult_ristretto255_base(unsigned char *q, const unsigned char *n);
        lib.crypto_scalarmult_ristretto255_base.restype = ctypes.c_int
        lib.crypto_scalarmult_ristretto255_base.argtypes = [_U8P, _U8P]

        logging.debug(f'Loaded libsodium from {name}')
        return lib

    raise RuntimeError(
        "Could not load libsodium with Ristretto255 support (>= 1.0.18). "
        f"Last error: {last_err}"
    )

def sodium():
    global _sodium
    if _sodium is None:
        _sodium = _load_libsodium()
    return _sodium

def _in(b: bytes):
    if len(b) != 32:
        raise ValueError(f'Expected a 32-byte buffer, got {len(b)} bytes')
    return (_U8 * 32).from_buffer_copy(b)

def _out():
    return (_U8 * 32)()

def bytes_from_scalar(k: int) -> bytes:
    return (k % L).to_bytes(SCALAR_BYTES, byteorder="little")

def point_add(P: bytes, Q: bytes) -> bytes:
    if P == IDENTITY:
        return bytes(Q)
    if Q == IDENTITY:
        return bytes(P)
    out = _out()
    if sodium().crypto_core_ristretto255_add(out, _in(P), _in(Q)) != 0:
        raise ValueError('Invalid Ristretto255 point encoding')
    return bytes(out)

def point_mul_base(k: int) -> bytes:
    k %= L
    if k == 0:
        return IDENTITY
    out = _out()
    if sodium().crypto_scalarmult_ristretto255_base(out, _in(bytes_from_scalar(k))) != 0:
        raise RuntimeError('libsodium ristretto255 base scalar multiplication failed')
    return bytes(out)

def point_mul(P: bytes, k: int) -> bytes:
    k %= L
    # libsodium reports an identity result as failure, so it never sees one
    if k == 0 or P == IDENTITY:
        return IDENTITY
    out = _out()
    if sodium().crypto_scalarmult_ristretto255(out, _in(bytes_from_scalar(k)), _in(P)) != 0:
        raise ValueError('Invalid Ristretto255 point encoding')
    return bytes(out)

class RistrettoGroup(Group):
    name = 'ristretto255'
    n = L
    infinity = IDENTITY

    def __init__(self):
        # Fails early with RuntimeError when libsodium is unavailable
        sodium()

    @property
    def G(self):
        return point_mul_base(1)

    def point_add(self, A, B):
        return point_add(A, B)

    def point_mul(self, A, k):
        return point_mul(A, k)

    def commit(self, k):
        return point_mul_base(k)
