"""
Module Instance Ids
==================

Multi-instance modules are addressed by composite ids of the form ``base#N``.
A bare base id counts as instance 1.
"""

import re
from typing import Iterable, List, Optional, Tuple

INSTANCE_SEPARATOR = "#"
_INSTANCE_PATTERN = re.compile(r"^(?P<base>.+)#(?P<number>[1-9]\d*)$")


def parse_instance_id(module_id: str) -> Tuple[str, Optional[int]]:
    """
    Split a module id into base id and instance number.

    Examples:
        >>> parse_instance_id("textFields#2")
        ('textFields', 2)
        >>> parse_instance_id("textFields")
        ('textFields', None)
    """
    match = _INSTANCE_PATTERN.match(module_id)
    if not match:
        return module_id, None
    return match.group("base"), int(match.group("number"))


def get_base_id(module_id: str) -> str:
    return parse_instance_id(module_id)[0]


def is_instance_id(module_id: str) -> bool:
    return parse_instance_id(module_id)[1] is not None


def create_instance_id(base_id: str, number: int) -> str:
    """Composite id for an instance. Instance 1 is the bare base id."""
    if number < 1:
        raise ValueError("Instance numbers start at 1")
    if number == 1:
        return base_id
    return f"{base_id}{INSTANCE_SEPARATOR}{number}"


def get_instances(base_id: str, enabled_ids: Iterable[str]) -> List[str]:
    """Enabled ids that are instances of ``base_id``, in enabled order."""
    return [module_id for module_id in enabled_ids if get_base_id(module_id) == base_id]


def instance_number(module_id: str) -> int:
    """Instance number of an id; a bare base id is instance 1."""
    number = parse_instance_id(module_id)[1]
    return 1 if number is None else number


def next_instance_number(base_id: str, enabled_ids: Iterable[str]) -> int:
    """Smallest positive instance number not used by an enabled instance."""
    used = {instance_number(module_id) for module_id in get_instances(base_id, enabled_ids)}
    number = 1
    while number in used:
        number += 1
    return number
