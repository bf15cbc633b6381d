from factor_finder.errors import DomainError


def modpow(base: int, exponent: int, modulus: int) -> int:
    """Square-and-multiply modular exponentiation."""
    if modulus <= 0:
        raise DomainError(f"modulus must be positive, got {modulus}")
    if exponent < 0:
        raise DomainError(f"exponent must be non-negative, got {exponent}")

    result = 1 % modulus
    base %= modulus  # non-negative residue, also for negative bases
    while exponent > 0:
        if exponent & 1:
            result = (result * base) % modulus
        exponent >>= 1
        base = (base * base) % modulus
    return result


def legendre(a: int, p: int) -> int:
    """Euler's criterion for odd prime p: 0, 1, or p - 1 for a non-residue."""
    return modpow(a, (p - 1) // 2, p)
