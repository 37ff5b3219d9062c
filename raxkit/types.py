"""Shared enumerations, default constants and the base error type."""

from __future__ import annotations

from enum import Enum, IntEnum

VERSION = "1.0.2-master"
RELEASE_DATE = "27.02.2021"

# numerical defaults
LOGLH_TOLERANCE = 1e-12

DEF_LH_EPSILON = 0.1
OPT_LH_EPSILON = 0.1
PARAM_EPSILON = 0.001
BFGS_FACTOR = 1e7

BRLEN_SMOOTHINGS = 32
BRLEN_DEFAULT = 0.1
BRLEN_MIN = 1.0e-6
BRLEN_MAX = 100.0
BRLEN_TOLERANCE = 1.0e-7

PINV_MIN = 1.0e-9
PINV_MAX = 0.99

FREERATE_MIN = 0.001
FREERATE_MAX = 100.0

BRLEN_SCALER_MIN = 0.01
BRLEN_SCALER_MAX = 100.0

RATESCALERS_TAXA = 2000

DEFAULT_PRECISION = 6

BOOTSTOP_CUTOFF = 0.03
BOOTSTOP_INTERVAL = 50
BOOTSTOP_PERMUTES = 1000

# cpu feature flags
CPU_SSE3 = 1 << 0
CPU_AVX = 1 << 1
CPU_FMA3 = 1 << 2
CPU_AVX2 = 1 << 3


class StartingTree(IntEnum):
    random = 0
    parsimony = 1
    user = 2


class Command(IntEnum):
    none = 0
    help = 1
    version = 2
    evaluate = 3
    search = 4
    bootstrap = 5
    all = 6
    support = 7
    bsconverge = 8
    bsmsa = 9
    terrace = 10
    check = 11
    parse = 12
    start = 13
    rfdist = 14
    consense = 15
    ancestral = 16
    sitelh = 17


class FileFormat(IntEnum):
    autodetect = 0
    fasta = 1
    phylip = 2
    iphylip = 3
    vcf = 4
    catg = 5
    binary = 6


class DataType(IntEnum):
    autodetect = 0
    dna = 1
    protein = 2
    binary = 3
    multistate = 4
    genotype10 = 5


class ParamValue(IntEnum):
    undefined = 0
    equal = 1
    user = 2
    model = 3
    empirical = 4
    ML = 5

    def __str__(self) -> str:
        return self.name


class BootstopCriterion(IntEnum):
    none = 0
    autoMRE = 1
    autoMR = 2
    autoFC = 3


class LoadBalancing(IntEnum):
    naive = 0
    kassian = 1
    benoit = 2


class BranchSupportMetric(IntEnum):
    fbp = 0
    tbe = 1


class InformationCriterion(IntEnum):
    aic = 0
    aicc = 1
    bic = 2


class ConsenseCutoff(IntEnum):
    MRE = 0
    MR = 50
    strict = 100


class RaxmlError(Exception):
    """Base error; subclasses may refresh the message lazily."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self._message = message

    def message(self) -> str:
        self._update_message()
        return self._message

    def __str__(self) -> str:
        return self.message()

    def _update_message(self) -> None:
        """Hook for subclasses that build their message on demand."""

    @staticmethod
    def _format_message(fmt: str, *args: object) -> str:
        return fmt % args


__all__ = [
    "StartingTree",
    "Command",
    "FileFormat",
    "DataType",
    "ParamValue",
    "BootstopCriterion",
    "LoadBalancing",
    "BranchSupportMetric",
    "InformationCriterion",
    "ConsenseCutoff",
    "RaxmlError",
    "Enum",
]