# toolbox/layout/merge.py
from __future__ import annotations

from copy import copy
from typing import Iterable

from .models import AppIcon, Layout


def merge_layouts(persisted: Iterable[AppIcon], defaults: Iterable[AppIcon]) -> Layout:
    """
    Reconcile a saved layout with the current canonical apps.

    Saved entries are kept as-is and in their order (user positions and sizes
    win). Defaults whose id is not saved yet are appended with their default
    position. Entries that disappeared from the defaults are kept too: the
    merge only ever adds.
    """
    out: Layout = [copy(a) for a in persisted]
    seen = {a.id for a in out}
    for app in defaults:
        if app.id in seen:
            continue
        out.append(copy(app))
        seen.add(app.id)
    return out
