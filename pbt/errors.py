from __future__ import annotations


class PBTError(Exception):
    pass


class ConfigurationError(PBTError, ValueError):
    pass


class RegistryError(PBTError):
    pass


class UnknownTypeError(RegistryError, LookupError):
    pass


# Not an error: raised by filtering generators and assume() to reject a sample.
# The checker counts it and moves on, so it deliberately isn't a PBTError.
class Discard(Exception):
    pass
