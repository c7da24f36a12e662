from enum import Enum, IntEnum


class ModelFamily(str, Enum):
    MPT = "mpt"
    PCM = "pcm"


class MPTVariant(str, Enum):
    FULL = "full"
    HH = "hh"


class AcquiescenceSource(str, Enum):
    """Which person dimension drives the acquiescence branch."""

    SHARED = "shared"
    TRAIT_SPECIFIC = "trait_specific"


class AcquiescenceExtremity(str, Enum):
    """Granularity of the extremity process inside the acquiescence branch."""

    PER_ITEM = "per_item"
    PER_PERSON = "per_person"


class MPTPersonDimension(IntEnum):
    """Leading person dimensions of the response style tree.

    Trait dimensions follow, starting at FIRST_TRAIT.
    """

    MIDDLE = 0
    EXTREME = 1
    ACQUIESCENCE = 2
    FIRST_TRAIT = 3


class MPTProcess(IntEnum):
    """Item process columns of the response style tree."""

    MIDDLE = 0
    EXTREME = 1
    ACQUIESCENCE = 2
    TRAIT = 3
    ACQUIESCENCE_EXTREME = 4
