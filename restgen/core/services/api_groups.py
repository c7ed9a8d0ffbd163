"""
API grouping — turn declared API items into a list of work units.

No items means one ungrouped scan over every input directory. Otherwise
each item becomes its own work unit, in declaration order, scoped by its
package list rather than by directory.
"""

from __future__ import annotations

from collections.abc import Sequence

from restgen.core.models.generation import UNNAMED_API, ApiItem, WorkUnit


def resolve_work_units(
    api_items: Sequence[ApiItem],
    input_dirs: Sequence[str],
) -> list[WorkUnit]:
    """Build the ordered work plan for one generation run.

    Args:
        api_items: Declared API items (may be empty).
        input_dirs: Compiled-class directories to scan.

    Returns:
        One WorkUnit with no name and no packages when api_items is
        empty; otherwise one WorkUnit per item, in order.
    """
    dirs = tuple(str(d) for d in input_dirs)

    if not api_items:
        return [WorkUnit(name=None, packages=None, input_dirs=dirs)]

    units = []
    for item in api_items:
        # An empty name is still passed explicitly; an empty package
        # list means no package restriction at all.
        units.append(
            WorkUnit(
                name=item.name,
                packages=tuple(item.packages) if item.packages else None,
                input_dirs=dirs,
            )
        )
    return units


def find_package_overlaps(api_items: Sequence[ApiItem]) -> dict[str, list[str]]:
    """Find packages declared by more than one API item.

    Overlaps are not resolved here: both items still scan the package
    and will likely produce duplicate definitions downstream.

    Returns:
        Mapping of package name → display names of the declaring items,
        only for packages declared more than once.
    """
    owners: dict[str, list[str]] = {}
    for item in api_items:
        label = item.name or UNNAMED_API
        for package in dict.fromkeys(item.packages):
            owners.setdefault(package, []).append(label)
    return {pkg: names for pkg, names in owners.items() if len(names) > 1}
