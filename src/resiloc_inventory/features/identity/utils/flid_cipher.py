"""Community id cipher for the ``flid`` header.

The header carries a community id encoded so the raw id does not appear in
requests. Encoding is deterministic and stateless: each character is XOR-ed
with a single key derived from the salt and written as two hex digits.
"""

from functools import reduce

from ....core.exceptions import InvalidArgumentError


class FlidCipher:
    """Symmetric, salt-keyed encoder for community ids."""

    def __init__(self, salt: str):
        if not salt:
            raise ValueError("Salt must be a non-empty string")
        self._key = reduce(lambda acc, char: acc ^ ord(char), salt, 0)

    @property
    def key(self) -> int:
        return self._key

    def cipher(self, text: str) -> str:
        """Encode ``text`` into its flid form."""
        return "".join(f"{ord(char) ^ self._key:02x}" for char in str(text))

    def decipher(self, encoded: str) -> str:
        """Decode a flid back into the community id.

        Raises:
            InvalidArgumentError: If ``encoded`` is not an even-length hex string
        """
        if not encoded or len(encoded) % 2 != 0:
            raise InvalidArgumentError("flid is malformed")
        try:
            return "".join(
                chr(int(encoded[i:i + 2], 16) ^ self._key)
                for i in range(0, len(encoded), 2)
            )
        except ValueError:
            raise InvalidArgumentError("flid is malformed")
