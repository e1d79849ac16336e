from collections import namedtuple
from dataclasses import dataclass
from functools import partial
from random import sample

import logging
import secrets

from errors import (
    ConfigurationError, DuplicateIndexError, RandomSourceError,
    ScalarError, ShareCountError, ShareIndexError,
)

# Order of the secp256k1 group, the default field for plain sharing
SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

Share = namedtuple('Share', ['index', 'value'])

def check_config(t, k):
    if t < 1:
        raise ConfigurationError(f'Threshold must be at least 1, got {t}')
    if t > k:
        raise ConfigurationError(f'Threshold {t} exceeds share amount {k}')

def to_scalar(secret, q):
    """Reduce a non-negative int or big-endian bytes into the field mod q."""
    if isinstance(secret, (bytes, bytearray)):
        return int.from_bytes(secret, byteorder="big") % q
    if not isinstance(secret, int) or isinstance(secret, bool):
        raise ScalarError(f'Expected an int or bytes, got {type(secret).__name__}')
    if secret < 0:
        raise ScalarError(f'Expected a non-negative integer, got {secret}')
    return secret % q

def random_scalar(q, rng=None):
    if rng is None:
        rng = secrets.SystemRandom()
    try:
        return rng.randrange(q)
    except (OSError, NotImplementedError) as e:
        raise RandomSourceError(f'Random source failed while sampling a scalar: {e}') from e

def sample_polynomial(secret, t, q, rng=None, draw=None):
    """Return [secret, a_1, ..., a_{t-1}] with uniform random a_i mod q.

    draw(rng) samples one coefficient; it defaults to random_scalar over q.
    """
    secret = to_scalar(secret, q)
    if rng is None:
        rng = secrets.SystemRandom()
    if draw is None:
        draw = partial(random_scalar, q)
    return [secret] + [draw(rng) for _ in range(t - 1)]

def poly_eval(coeffs, x, q):
    # Horner's method
    y = 0
    for c_i in reversed(coeffs):
        y = (y * x + c_i) % q
    return y

def check_distinct(xs, q):
    seen = set()
    for x in xs:
        if x % q in seen:
            raise DuplicateIndexError(f'Duplicate evaluation point {x}')
        seen.add(x % q)

def _basis(xs, x_j, q, x):
    num = 1
    den = 1
    for x_i in xs:
        if x_i != x_j:
            num = num * (x - x_i) % q
            den = den * (x_j - x_i) % q
    return num * pow(den, q - 2, q) % q

def lagrange(T, i, q, x=0):
    """Lagrange basis coefficient for point i over the points T, evaluated at x."""
    T = [j % q for j in T]
    check_distinct(T, q)
    return _basis(T, i % q, q, x)

def lagrange_interpolate(x, xs, ys, q):
    """Evaluate at x the unique polynomial of degree < len(xs) through (xs, ys)."""
    if len(xs) != len(ys):
        raise ShareCountError(f'Got {len(xs)} evaluation points but {len(ys)} values')
    xs = [x_i % q for x_i in xs]
    check_distinct(xs, q)
    z = 0
    for x_j, y_j in zip(xs, ys):
        z = (z + _basis(xs, x_j, q, x) * y_j) % q
    return z

def evaluate_shares(coeffs, k, q):
    return [Share(i, poly_eval(coeffs, i % q, q)) for i in range(1, k + 1)]

def split_secret(secret, t, k, q=SECP256K1_ORDER, rng=None):
    check_config(t, k)
    coeffs = sample_polynomial(secret, t, q, rng)
    return dict(evaluate_shares(coeffs, k, q))

def check_index(i, k):
    if not isinstance(i, int) or isinstance(i, bool):
        raise ShareIndexError(f'Share index must be an int, got {type(i).__name__}')
    if not 1 <= i <= k:
        raise ShareIndexError(f'Share index {i} outside of 1..{k}')

def recover_secret(shares, t, k, q=SECP256K1_ORDER):
    if isinstance(shares, dict):
        shares = list(shares.items())
    if len(shares) != t:
        raise ShareCountError(f'Expected exactly {t} shares, got {len(shares)}')
    xs = []
    ys = []
    for i, y in shares:
        check_index(i, k)
        xs.append(i)
        ys.append(y % q)
    return lagrange_interpolate(0, xs, ys, q)

@dataclass(frozen=True)
class ShamirSecretSharing:
    threshold: int
    share_amount: int
    prime: int = SECP256K1_ORDER

    def __post_init__(self):
        check_config(self.threshold, self.share_amount)

    def split(self, secret, rng=None):
        coeffs = sample_polynomial(secret, self.threshold, self.prime, rng)
        logging.debug(f'Splitting secret into {self.share_amount} shares with threshold {self.threshold}')
        return evaluate_shares(coeffs, self.share_amount, self.prime)

    def recover(self, shares):
        return recover_secret(shares, self.threshold, self.share_amount, self.prime)

def test_shamir():
    for k in range(3, 10):
        for t in range(2, k):
            secret = 1 + secrets.randbelow(SECP256K1_ORDER - 1)
            all_shares = split_secret(secret, t, k)
            threshold_shares = dict(sample(list(all_shares.items()), t))
            assert recover_secret(threshold_shares, t, k) == secret

if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    test_shamir()
    logging.info('Shamir round trips passed')
