from itertools import combinations
from random import Random, sample

import pytest

from errors import (
    ConfigurationError, DuplicateIndexError, RandomSourceError,
    ScalarError, ShareCountError, ShareIndexError,
)
from shamir import (
    SECP256K1_ORDER, Share, ShamirSecretSharing,
    lagrange, lagrange_interpolate, poly_eval, recover_secret,
    random_scalar, sample_polynomial, split_secret, to_scalar,
)
import shamir

q = SECP256K1_ORDER

class BrokenRandom:
    def randrange(self, n):
        raise OSError('entropy source unavailable')

def test_poly_eval_horner():
    # 5 + 3x + 2x^2
    coeffs = [5, 3, 2]
    assert poly_eval(coeffs, 0, q) == 5
    assert poly_eval(coeffs, 1, q) == 10
    assert poly_eval(coeffs, 4, q) == 5 + 12 + 32
    assert poly_eval([q - 1, 1], 1, q) == 0

def test_sample_polynomial():
    coeffs = sample_polynomial(7, 4, q, Random(1))
    assert len(coeffs) == 4
    assert coeffs[0] == 7
    assert all(0 <= c < q for c in coeffs)
    assert sample_polynomial(7, 1, q, Random(1)) == [7]

def test_sample_polynomial_random_source_failure():
    with pytest.raises(RandomSourceError):
        sample_polynomial(7, 3, q, BrokenRandom())

def test_lagrange_interpolate_any_point():
    coeffs = [11, 22, 33]
    xs = [2, 5, 9]
    ys = [poly_eval(coeffs, x, q) for x in xs]
    assert lagrange_interpolate(0, xs, ys, q) == 11
    assert lagrange_interpolate(1, xs, ys, q) == 66
    assert lagrange_interpolate(7, xs, ys, q) == poly_eval(coeffs, 7, q)

def test_lagrange_coefficients_sum_to_one():
    T = [1, 3, 4, 8]
    assert sum(lagrange(T, i, q) for i in T) % q == 1

def test_lagrange_duplicate_points():
    with pytest.raises(DuplicateIndexError):
        lagrange_interpolate(0, [1, 2, 2], [5, 6, 6], q)
    with pytest.raises(DuplicateIndexError):
        lagrange([1, 1, 3], 3, q)

def test_split_recover_every_subset():
    t, k = 3, 6
    secret = 123456789
    shares = split_secret(secret, t, k)
    assert sorted(shares) == list(range(1, k + 1))
    for subset in combinations(shares.items(), t):
        assert recover_secret(list(subset), t, k) == secret

def test_split_recover_random_subsets():
    shamir.test_shamir()

def test_threshold_one():
    shares = split_secret(42, 1, 3)
    assert set(shares.values()) == {42}
    assert recover_secret({2: shares[2]}, 1, 3) == 42

def test_invalid_config():
    with pytest.raises(ConfigurationError):
        split_secret(1, 4, 3)
    with pytest.raises(ConfigurationError):
        split_secret(1, 0, 3)
    with pytest.raises(ConfigurationError):
        ShamirSecretSharing(threshold=6, share_amount=5)

def test_recover_wrong_count():
    shares = split_secret(9, 3, 5)
    items = list(shares.items())
    with pytest.raises(ShareCountError):
        recover_secret(items[:2], 3, 5)
    with pytest.raises(ShareCountError):
        recover_secret(items, 3, 5)

def test_recover_duplicate_index():
    shares = split_secret(9, 3, 5)
    with pytest.raises(DuplicateIndexError):
        recover_secret([(1, shares[1]), (1, shares[1]), (2, shares[2])], 3, 5)

def test_recover_index_out_of_range():
    shares = split_secret(9, 2, 5)
    with pytest.raises(ShareIndexError):
        recover_secret([(0, 1), (1, shares[1])], 2, 5)
    with pytest.raises(ShareIndexError):
        recover_secret([(6, 1), (1, shares[1])], 2, 5)
    with pytest.raises(ShareIndexError):
        recover_secret([('2', shares[2]), (1, shares[1])], 2, 5)

def test_scheme_small_prime():
    sss = ShamirSecretSharing(threshold=3, share_amount=5, prime=2**127 - 1)
    shares = sss.split(2**100 + 17, Random(7))
    assert len(shares) == 5
    assert all(isinstance(s, Share) for s in shares)
    assert [s.index for s in shares] == [1, 2, 3, 4, 5]
    for subset in combinations(shares, 3):
        assert sss.recover(list(subset)) == 2**100 + 17

def test_scheme_fresh_randomness():
    sss = ShamirSecretSharing(threshold=4, share_amount=7)
    a = sss.split(99)
    b = sss.split(99)
    assert a != b
    assert sss.recover(sample(a, 4)) == 99
    assert sss.recover(sample(b, 4)) == 99

def test_lagrange_mismatched_lengths():
    coeffs = [11, 22, 33]
    xs = [2, 5, 9]
    ys = [poly_eval(coeffs, x, q) for x in xs]
    with pytest.raises(ShareCountError):
        lagrange_interpolate(0, xs, ys[:2], q)
    with pytest.raises(ShareCountError):
        lagrange_interpolate(0, xs[:2], ys, q)

def test_to_scalar():
    assert to_scalar(q + 4, q) == 4
    assert to_scalar(b'\x01\x00', q) == 256
    for bad in [1.5, 2.0, True, '7', None, -1]:
        with pytest.raises(ScalarError):
            to_scalar(bad, q)

def test_non_integer_secret_rejected():
    sss = ShamirSecretSharing(threshold=2, share_amount=3)
    with pytest.raises(ScalarError):
        sss.split(1.5)
    with pytest.raises(ScalarError):
        sss.split(False)
    with pytest.raises(ScalarError):
        sss.split(-1)
    with pytest.raises(ScalarError):
        split_secret(7.0, 2, 3)

def test_random_scalar_source_failure():
    assert 0 <= random_scalar(q, Random(3)) < q
    with pytest.raises(RandomSourceError):
        random_scalar(q, BrokenRandom())

def test_sample_polynomial_custom_draw():
    assert sample_polynomial(7, 3, q, Random(0), draw=lambda rng: 5) == [7, 5, 5]
