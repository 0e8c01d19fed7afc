from __future__ import annotations

from typing import Iterable, List, Tuple

from ..schemas import SanitizeOptions


def is_element_allowed(tag: str, policy: SanitizeOptions) -> bool:
    return tag in policy.allowed_elements


def filter_attributes(
    tag: str,
    attributes: Iterable[Tuple[str, str]],
    policy: SanitizeOptions,
) -> List[Tuple[str, str]]:
    # Attributes are allowed globally, so ``tag`` does not narrow the result.
    return [(name, value) for name, value in attributes if name in policy.allowed_attributes]
