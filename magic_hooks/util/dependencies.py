from typing import Any, Optional, Sequence


def is_same(a: Any, b: Any) -> bool:
    """Identity first, then value equality. Ambiguous comparisons count as different."""
    if a is b:
        return True
    try:
        return bool(a == b)
    except (TypeError, ValueError):
        # e.g. numpy arrays, whose == is elementwise
        return False


def are_dependencies_equal(
    previous: Optional[Sequence[Any]],
    dependencies: Optional[Sequence[Any]],
) -> bool:
    """
    Shallow comparison of two dependency lists.

    A missing list on either side is never equal, so a hook called without
    dependencies is re-evaluated on every render.
    """
    if previous is None or dependencies is None:
        return False
    if len(previous) != len(dependencies):
        return False
    return all(is_same(a, b) for a, b in zip(previous, dependencies))


def is_function(value: Any) -> bool:
    return callable(value)
