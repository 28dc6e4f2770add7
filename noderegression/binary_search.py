"""
Binary search driven by an asynchronous comparison function.
"""

import math
import numbers


def _check_bound(value, name):
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise TypeError("%s must be an integer, got %s" % (name, type(value).__name__))
    if value < 0:
        raise ValueError("%s must be a non-negative integer, got %d" % (name, value))
    return int(value)


async def binary_search_async(haystack, compare, low=None, high=None, progress=None):
    """
    Binary search *haystack* using the coroutine function *compare*.

    :param haystack: sorted sequence to search.
    :param compare: coroutine function called with an item of *haystack*. It
                    must return a positive number if the wanted position is
                    after that item, a negative number if it is before, 0 if
                    the item is the one searched for, or NaN to abort the
                    search.
    :param low: smallest index to search (inclusive), defaults to 0.
    :param high: largest index to search (inclusive), defaults to the last
                 index.
    :param progress: callable called with (low, high) before each comparison.

    Returns the index where *compare* returned 0, NaN if *compare* returned
    NaN, or ``-i - 1`` where ``i`` is the index at which the searched item
    would be inserted.
    """
    length = len(haystack)
    low = 0 if low is None else _check_bound(low, "low")
    high = length - 1 if high is None else _check_bound(high, "high")

    if low >= length:
        return -length - 1
    high = min(high, length - 1)

    while low <= high:
        if progress is not None:
            progress(low, high)

        mid = low + (high - low) // 2
        result = await compare(haystack[mid])
        if isinstance(result, bool) or not isinstance(result, numbers.Real):
            raise TypeError("compare result must be a number, got %s" % type(result).__name__)
        if math.isnan(result):
            return result
        if result > 0:
            low = mid + 1
        elif result < 0:
            high = mid - 1
        else:
            return mid

    return -low - 1
