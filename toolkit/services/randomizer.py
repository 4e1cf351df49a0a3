# toolkit/services/randomizer.py
import secrets

RANDOM_STRING_SOURCE = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_+"


def random_string(length: int, alphabet: str = RANDOM_STRING_SOURCE) -> str:
    """
    Return `length` symbols from `alphabet`, drawn from the OS CSPRNG.

    Bytes at or above the largest multiple of len(alphabet) are discarded, so
    every symbol is equally likely. Entropy source failures propagate.
    """
    if length < 0:
        raise ValueError("length must not be negative")
    size = len(alphabet)
    if not 0 < size <= 256:
        raise ValueError("alphabet must contain between 1 and 256 symbols")

    cutoff = 256 - (256 % size)
    out: list[str] = []
    while len(out) < length:
        for b in secrets.token_bytes(length - len(out)):
            if b < cutoff:
                out.append(alphabet[b % size])
    return "".join(out)
