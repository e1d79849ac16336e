"""
Feldman verifiable secret sharing over a prime-order group.

The dealer samples a polynomial f of degree t - 1 with f(0) = secret, hands
out the shares (i, f(i)) for i = 1, ..., n and publishes the commitments
C_j = G * a_j to the coefficients of f. A holder of share (i, s_i) checks

    G * s_i == sum_j C_j * i^j

which is evaluated with Horner's method in the exponent. Any t shares
recover the secret by Lagrange interpolation at 0.
"""

from dataclasses import dataclass, field
from functools import partial
from multiprocessing import Pool

import logging

from errors import CommitmentLengthError
from fastec import Secp256k1Group
from group import Group
from shamir import Share, check_config, check_index, evaluate_shares, recover_secret, sample_polynomial

@dataclass(frozen=True)
class VerifiableSecretSharing:
    threshold: int
    share_amount: int
    group: Group = field(default_factory=Secp256k1Group)

    def __post_init__(self):
        check_config(self.threshold, self.share_amount)

    @classmethod
    def ristretto(cls, threshold, share_amount):
        from ristretto import RistrettoGroup
        return cls(threshold, share_amount, RistrettoGroup())

    def commit(self, polynomial):
        return [self.group.commit(a_j) for a_j in polynomial]

    def split(self, secret, rng=None):
        """Split secret into share_amount shares and commitments to the polynomial.

        Returns (shares, commitments). The polynomial itself is discarded.
        """
        q = self.group.n
        polynomial = sample_polynomial(secret, self.threshold, q, rng, draw=self.group.random_scalar)
        shares = evaluate_shares(polynomial, self.share_amount, q)
        commitments = self.commit(polynomial)
        logging.debug(f'Split secret over {self.group.name} into {self.share_amount} shares (threshold {self.threshold})')
        return shares, commitments

    def recover(self, shares):
        secret = recover_secret(shares, self.threshold, self.share_amount, self.group.n)
        logging.debug(f'Recovered secret over {self.group.name} from {len(shares)} shares')
        return secret

    def check_commitments(self, commitments):
        if len(commitments) != self.threshold:
            raise CommitmentLengthError(f'Expected {self.threshold} commitments, got {len(commitments)}')

    def verify(self, share, commitments):
        self.check_commitments(commitments)
        i, s_i = share
        check_index(i, self.share_amount)
        group = self.group
        x = group.scalar_from_int(i)

        lhs = group.commit(s_i % group.n)
        # Descending degree: acc = acc * x + C_j
        rhs = commitments[-1]
        for C_j in reversed(commitments[:-1]):
            rhs = group.point_add(group.point_mul(rhs, x), C_j)
        return group.point_eq(lhs, rhs)

    def verify_all(self, shares, commitments, processes=None):
        """Return True iff every share verifies, stopping at the first failure.

        With processes > 1 the checks are spread over a multiprocessing pool.
        """
        self.check_commitments(commitments)
        if not processes or processes <= 1 or len(shares) <= 1:
            for share in shares:
                if not self.verify(share, commitments):
                    logging.debug(f'Share {share[0]} failed verification')
                    return False
            return True

        check = partial(self.verify, commitments=list(commitments))
        chunksize = max(1, len(shares) // (4 * processes))
        with Pool(processes) as pool:
            for share, ok in zip(shares, pool.imap(check, shares, chunksize)):
                if not ok:
                    logging.debug(f'Share {share[0]} failed verification')
                    return False
        return True

def test_vss():
    vss = VerifiableSecretSharing(threshold=3, share_amount=5)
    shares, commitments = vss.split(7)
    assert vss.recover(shares[1:4]) == 7
    assert vss.verify_all(shares, commitments)
    i, s_i = shares[0]
    assert not vss.verify(Share(i, s_i + 1), commitments)

if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    test_vss()
    logging.info('Feldman VSS checks passed')
