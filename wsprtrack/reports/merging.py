from typing import List, Sequence

from wsprtrack.reports.base import RawReport


def merge_reports(old_reports: Sequence[RawReport], new_reports: Sequence[RawReport]) -> List[RawReport]:
    """
    Merge two report sequences sorted by `(time, callsign)` into one sorted sequence in a single pass.
    On a key collision the report from `new_reports` is kept, since it has had more time to accumulate receptions.

    >>> merge_reports([], [])
    []

    :param old_reports: previously retrieved reports
    :param new_reports: newly retrieved reports
    :return: merged reports
    """

    merged = []
    old_index = 0
    new_index = 0

    while old_index < len(old_reports) and new_index < len(new_reports):
        old_key = old_reports[old_index].key
        new_key = new_reports[new_index].key
        if old_key < new_key:
            merged.append(old_reports[old_index])
            old_index += 1
        elif old_key > new_key:
            merged.append(new_reports[new_index])
            new_index += 1
        else:
            merged.append(new_reports[new_index])
            old_index += 1
            new_index += 1

    merged.extend(old_reports[old_index:])
    merged.extend(new_reports[new_index:])

    return merged
