"""
Sorting records with caller-supplied ordering logic.

Sorts a small photo catalogue three ways: with a plain Python comparator,
with a registered named strategy, and with a comparison expression (useful
when the ordering comes from configuration rather than code). The number of
comparator calls is reported, since every call crosses into caller code.
"""

import os

os.environ.setdefault("JAX_PLATFORMS", "cpu")

import twinbench
from twinbench.core.comparator import ComparatorBridge
from twinbench.core import boundary, sorting
from twinbench.extra import comparator_from_expression, get_comparator

PHOTOS = [
    {"id": 4, "title": "harbour at dusk", "likes": 120, "year": 2021},
    {"id": 1, "title": "Alpine lake", "likes": 87, "year": 2019},
    {"id": 7, "title": "city lights", "likes": 120, "year": 2023},
    {"id": 2, "title": "Desert road", "likes": 12, "year": 2019},
    {"id": 9, "title": "forest trail", "likes": 301, "year": 2022},
]


def by_likes_desc(a: dict, b: dict) -> int:
    return b["likes"] - a["likes"]


def count_comparisons(comparator) -> int:
    bridge = ComparatorBridge(comparator)
    storage, handles = boundary.box_elements(PHOTOS)
    sorting.merge_sort_handles(storage, handles, bridge)
    return bridge.calls


def main() -> None:
    session = twinbench.init(seed=0)
    try:
        most_liked = twinbench.sort(PHOTOS, by_likes_desc)
        print("most liked:", [p["id"] for p in most_liked])
        print("comparator calls:", count_comparisons(by_likes_desc))

        titles = twinbench.sort(
            [p["title"] for p in PHOTOS], get_comparator("case_insensitive")
        )
        print("titles:", titles)

        newest_then_title = comparator_from_expression(
            (
                "then",
                ("cmp", ("field", "b", "year"), ("field", "a", "year")),
                ("cmp", ("lower", ("field", "a", "title")), ("lower", ("field", "b", "title"))),
            )
        )
        print("newest first:", [p["id"] for p in twinbench.sort(PHOTOS, newest_then_title)])
        print("likes:", twinbench.sort_numbers([p["likes"] for p in PHOTOS], ascending=False))
    finally:
        session.close()


if __name__ == "__main__":
    main()
