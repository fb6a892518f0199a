"""module for logging namat progress
"""
from datetime import datetime
import copy
import warnings

from .namat_warnings import NamatWarning


class Logger(object):
    """a basic class for logging the start, finish and duration of the more
        expensive matrix operations.  If filename is passed, then a file handle
        is opened.

    Args:
        filename (`str` or `bool`): Filename to write logged events to. If True, no file
            is created and logged events are echoed to standard out. If False, nothing
            is written anywhere.
        echo (`bool`):  Flag to cause logged events to be echoed to the screen.

    Example::

        logger = namat.Logger("mult.log")
        prod = a.mult(b, verbose="mult.log")

    """

    def __init__(self, filename, echo=False):
        self.items = {}
        self.echo = bool(echo)
        self.f = None
        if filename is True:
            self.echo = True
            self.filename = None
        elif filename:
            self.filename = filename
            self.f = open(filename, "w")
            self.t = datetime.now()
            self.statement("opening " + str(filename) + " for logging")
        else:
            self.filename = None

    def _write(self, s):
        if self.echo:
            print(s, end="")
        if self.f is not None:
            self.f.write(s)
            self.f.flush()

    def statement(self, phrase):
        """log a one-time statement

        Arg:
            phrase (`str`): statement to log

        """
        t = datetime.now()
        self._write(str(t) + " " + str(phrase) + "\n")

    def log(self, phrase):
        """log something that happened.

        Arg:
            phrase (`str`): statement to log

        Notes:
            The first time phrase is passed the start time is saved.
                The second time the phrase is logged, the elapsed time is written
        """
        t = datetime.now()
        if phrase in self.items:
            self._write(
                str(t)
                + " finished: "
                + str(phrase)
                + " took: "
                + str(t - self.items[phrase])
                + "\n"
            )
            self.items.pop(phrase)
        else:
            self._write(str(t) + " starting: " + str(phrase) + "\n")
            self.items[phrase] = copy.deepcopy(t)

    def warn(self, message):
        """write a warning to the log file and issue a `NamatWarning`.

        Arg:
            message (`str`): warning statement to log

        """
        s = str(datetime.now()) + " WARNING: " + message + "\n"
        self._write(s)
        warnings.warn(message, NamatWarning)

    def lraise(self, message, exc_type=Exception):
        """log an exception, close the log file, then raise the exception.
        Nothing is printed unless the logger echoes.

        Arg:
            message (`str`): exception statement to log and raise
            exc_type (`type`): the exception class to raise.  Default is `Exception`

        """
        self._write(str(datetime.now()) + " ERROR: " + message + "\n")
        self.close()
        raise exc_type(message)

    def close(self):
        """close the log file, if one is open"""
        if self.f is not None:
            self.f.close()
            self.f = None
