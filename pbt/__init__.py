from pbt.arbitrary import (Arbitrary, as_arbitrary, booleans, characters, integers, lists, optionals,
                           records, sampled_from, text, tuples)
from pbt.checker import CheckConfig, check, check_many, quick_check, replay
from pbt.errors import ConfigurationError, Discard, PBTError, RegistryError, UnknownTypeError
from pbt.generator import Generator, choose, constant, one_of, sample, sized
from pbt.property import (Property, TestResult, assume, classify, collect, for_all, for_allN, implies,
                          label)
from pbt.random_source import RandomSource
from pbt.registry import REGISTRY, Registry, default_registry, register
from pbt.result import Fault, Result, Status, report
from pbt.shrink import Shrink

__all__ = [
    "Arbitrary", "CheckConfig", "ConfigurationError", "Discard", "Fault", "Generator", "PBTError",
    "Property", "REGISTRY", "RandomSource", "Registry", "RegistryError", "Result", "Shrink", "Status",
    "TestResult", "UnknownTypeError", "as_arbitrary", "assume", "booleans", "characters", "check",
    "check_many", "choose", "classify", "collect", "constant", "default_registry", "for_all", "for_allN",
    "implies", "integers", "label", "lists", "one_of", "optionals", "quick_check", "records", "register",
    "replay", "report", "sample", "sampled_from", "sized", "text", "tuples",
]
