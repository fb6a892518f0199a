import warnings


def warning_on_one_line(message, category, filename, lineno, file=None, line=None):
    return "%s:%s: %s: %s\n" % (filename, lineno, category.__name__, message)


warnings.formatwarning = warning_on_one_line


class NamatWarning(Warning):
    """warning category for recoverable data conditions in namat operations,
    such as missing values flowing into a numeric product"""

    pass
