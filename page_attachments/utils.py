# ------------------------------------------------------------------------
# ------------------------------------------------------------------------

from importlib import import_module


# ------------------------------------------------------------------------
def get_object(path, fail_silently=False):
    # Return early if path isn't a string (might already be an callable or
    # a class or whatever)
    if not isinstance(path, str):
        return path

    try:
        return import_module(path)
    except ImportError:
        try:
            dot = path.rindex(".")
            mod, fn = path[:dot], path[dot + 1 :]

            return getattr(import_module(mod), fn)
        except (AttributeError, ImportError, ValueError):
            if not fail_silently:
                raise


# ------------------------------------------------------------------------
def truncate(value, length=15, suffix=" ..."):
    """
    Cut ``value`` down to ``length`` characters, ``suffix`` included, if it
    is longer than that. Shorter values are returned untouched::

        >>> truncate("Quarterly Report Final")
        'Quarterly R ...'
        >>> truncate("Report")
        'Report'
        >>> truncate("Quarterly Report Final", 2)
        ' .'
    """

    value = value or ""
    if len(value) <= length:
        return value
    if length < len(suffix):
        return suffix[: max(length, 0)]
    return value[: length - len(suffix)] + suffix


# ------------------------------------------------------------------------
#: Accepted ``units`` values and their divisor.
SIZE_UNITS = {
    "bytes": 1,
    "byte": 1,
    "kilobytes": 1024,
    "kilobyte": 1024,
    "megabytes": 1024**2,
    "megabyte": 1024**2,
    "gigabytes": 1024**3,
    "gigabyte": 1024**3,
}


def format_size(size, units="bytes"):
    """
    Bytes are returned as-is, everything else with two decimal places.
    Unknown units fall back to bytes::

        >>> format_size(2097152, "megabytes")
        '2.00'
        >>> format_size(2097152, "furlongs")
        2097152
    """

    if units not in SIZE_UNITS or units == "bytes":
        return size
    return "%.2f" % (float(size or 0) / SIZE_UNITS[units])
