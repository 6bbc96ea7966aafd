"""BIP32 derivation paths.

Format: m/purpose'/coin_type'/account'/change/index
A trailing ' (or h/H) marks a hardened index, stored with the 0x80000000 offset.
"""

from dataclasses import dataclass

from eip712_signer.errors import InvalidDerivationPath

HARDENED_OFFSET = 0x80000000
MAX_INDEX = 0xFFFFFFFF
HARDENED_MARKERS = ("'", "h", "H")


@dataclass(frozen=True)
class DerivationPath:
    """Immutable sequence of BIP32 child indices."""

    indices: tuple[int, ...]

    def __post_init__(self):
        if not self.indices:
            raise InvalidDerivationPath("Derivation path must contain at least one index")
        for index in self.indices:
            if not 0 <= index <= MAX_INDEX:
                raise InvalidDerivationPath(f"Index {index} out of range [0, {MAX_INDEX}]")

    @classmethod
    def parse(cls, text: str) -> "DerivationPath":
        """Parse a path such as m/44'/60'/0'/0/0.

        Raises:
            InvalidDerivationPath: On any syntax or range error
        """
        if not isinstance(text, str):
            raise InvalidDerivationPath(f"Derivation path must be a string, got {type(text).__name__}")

        components = [c.strip() for c in text.strip().split("/")]
        if components[0] != "m":
            raise InvalidDerivationPath(f"Derivation path must start with 'm/': {text!r}")
        if len(components) < 2:
            raise InvalidDerivationPath(f"Derivation path has no indices: {text!r}")

        indices = []
        for component in components[1:]:
            indices.append(_parse_component(component, text))

        return cls(tuple(indices))

    @staticmethod
    def is_hardened(index: int) -> bool:
        return index >= HARDENED_OFFSET

    def __len__(self) -> int:
        return len(self.indices)

    def __iter__(self):
        return iter(self.indices)

    @property
    def relative(self) -> str:
        """Path without the leading m/ (the form Ledger libraries expect)."""
        parts = []
        for index in self.indices:
            if self.is_hardened(index):
                parts.append(f"{index - HARDENED_OFFSET}'")
            else:
                parts.append(str(index))
        return "/".join(parts)

    def __str__(self) -> str:
        return f"m/{self.relative}"


def _parse_component(component: str, text: str) -> int:
    """Parse one path segment into a raw child index."""
    hardened = False
    digits = component
    if component.endswith(HARDENED_MARKERS):
        hardened = True
        digits = component[:-1].strip()

    if not digits or not digits.isascii() or not digits.isdigit():
        raise InvalidDerivationPath(f"Invalid path component {component!r} in {text!r}")

    value = int(digits)
    if hardened:
        if value >= HARDENED_OFFSET:
            raise InvalidDerivationPath(
                f"Hardened component {component!r} out of range [0, {HARDENED_OFFSET - 1}]"
            )
        return value + HARDENED_OFFSET

    if value > MAX_INDEX:
        raise InvalidDerivationPath(f"Component {component!r} out of range [0, {MAX_INDEX}]")
    return value
