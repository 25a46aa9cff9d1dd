from typing import NewType

Gwei = NewType("Gwei", int)  # uint64

Second = NewType("Second", int)

Version = NewType("Version", bytes)  # bytes of length 4
