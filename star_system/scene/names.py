"""Default planet names."""

from typing import List

from star_system.utils.reproducibility import NAMES_SALT, SeededStream

PREFIXES = ["Zeta", "Epsilon", "Delta", "Theta", "Omega", "Sigma", "Alpha",
            "Beta", "Gamma", "Kappa", "Rho", "Tau", "Xi"]
ROMAN_SUFFIXES = ["I", "II", "III", "IV", "V", "VI", "VII", "VIII", "IX", "X"]
SYLLABLES = ["ka", "tor", "vel", "ria", "zan", "kor", "tal", "xen", "ili",
             "dra", "nus", "mir", "pho", "lyr", "cyg"]


def default_names(seed: int, count: int) -> List[str]:
    """Generate ``count`` default names from a single seed-salted stream.

    The stream is consumed planet by planet, so name ``i`` depends on every
    name before it.
    """
    stream = SeededStream(seed, NAMES_SALT)
    names = []
    for _ in range(count):
        if stream.random() < 0.5:
            prefix = stream.choice(PREFIXES)
            suffix = stream.choice(ROMAN_SUFFIXES)
            names.append(f"{prefix} {suffix}")
        else:
            parts = 2 + stream.randint_below(2)
            name = "".join(stream.choice(SYLLABLES) for _ in range(parts))
            names.append(name[0].upper() + name[1:])
    return names
