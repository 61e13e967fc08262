"""Branch-key compaction for generated plural/select mappings.

Generated code passes branches to the runtime helpers as dict literals.
Plural categories are emitted as their shortest distinguishing prefix,
exact `=N` keys as numeric literals, and `other` as a reserved key the
helpers recognize without looking at its content.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Iterable
from decimal import Decimal

from precompile_intl.constants import OTHER_KEY, PLURAL_CATEGORY_KEYS
from precompile_intl.enums import PluralCategory
from precompile_intl.syntax.ast import BranchKey

__all__ = [
    "PLURAL_CATEGORY_KEYS",
    "compact_keys",
    "plural_output_key",
    "select_output_key",
]


def compact_keys(keys: Iterable[str]) -> dict[str, str]:
    """Map each key to its shortest prefix that is not a prefix of another key.

    A key that is itself a prefix of another key keeps its full text. The
    result is injective: a proper prefix chosen for one key is not a prefix
    of any other key, so it cannot equal another key's output. It depends
    only on the set of keys, not their order.

    Args:
        keys: Distinct, non-empty keys

    Returns:
        Mapping from key to compacted key, in input order

    Example:
        >>> compact_keys(["zero", "one", "two", "few", "many"])
        {'zero': 'z', 'one': 'o', 'two': 't', 'few': 'f', 'many': 'm'}
        >>> compact_keys(["male", "female", "mal"])
        {'male': 'male', 'female': 'f', 'mal': 'mal'}
    """
    ordered = list(dict.fromkeys(keys))
    result: dict[str, str] = {}
    for key in ordered:
        others = [other for other in ordered if other != key]
        for length in range(1, len(key) + 1):
            prefix = key[:length]
            if not any(other.startswith(prefix) for other in others):
                result[key] = prefix
                break
        else:
            result[key] = key
    return result


def plural_output_key(key: BranchKey) -> str | int | Decimal:
    """Output key of a plural branch.

    Exact keys stay numeric; categories use PLURAL_CATEGORY_KEYS, which is
    compact_keys() of the non-other categories plus OTHER_KEY for other.
    """
    if isinstance(key, str):
        return PLURAL_CATEGORY_KEYS[key]
    return key


def select_output_key(key: BranchKey) -> str:
    """Output key of a select branch.

    Select keys are matched against raw argument values at runtime, so they
    are kept verbatim; only `other` moves to the reserved slot.
    """
    text = str(key)
    return OTHER_KEY if text == PluralCategory.OTHER else text
