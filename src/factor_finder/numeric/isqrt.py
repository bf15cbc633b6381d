from factor_finder.errors import DomainError


def isqrt(n: int) -> int:
    """Floor square root by Newton iteration. Exact for any non-negative n."""
    if n < 0:
        raise DomainError(f"square root of negative number: {n}")
    if n < 2:
        return n

    x0 = n
    x1 = n // 2 + 1
    while x1 < x0:
        x0 = x1
        x1 = (x0 + n // x0) // 2
    return x0


def is_perfect_square(n: int) -> bool:
    if n < 0:
        return False
    root = isqrt(n)
    return root * root == n
