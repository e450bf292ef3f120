import logging
import sys

from . import core


class Literal(object):
    def __init__(self, values):
        self.values = list(values)

    def __iter__(self):
        return iter(self.values)


class Empty(object):
    def __iter__(self):
        return iter(())


class Lines(object):
    """Reads one integer per line from a text stream, skipping blank lines"""

    def __init__(self, stream=None):
        self.stream = stream if stream is not None else sys.stdin
        self.log = logging.getLogger('intcode.lines')

    def __iter__(self):
        for line in self.stream:
            line = line.strip()
            if not line:
                continue

            try:
                val = int(line)
            except ValueError:
                raise core.ParseError("not an integer: {!r}".format(line)) from None

            self.log.debug('read {}'.format(val))
            yield val


class Collector(object):
    def __init__(self):
        self.values = list()

    def send(self, value):
        self.values.append(value)


class Cell(object):
    def __init__(self, value=None):
        self.value = value

    def send(self, value):
        self.value = value


class Discard(object):
    def send(self, value):
        pass


class Terminal(object):
    def __init__(self, stream=None):
        self.stream = stream if stream is not None else sys.stdout
        self.log = logging.getLogger('intcode.terminal')

    def send(self, value):
        self.log.debug('write {}'.format(value))
        self.stream.write('{}\n'.format(value))
        self.stream.flush()


class Broadcast(object):
    def __init__(self, first, second):
        self.first = first
        self.second = second

    def send(self, value):
        self.first.send(value)
        self.second.send(value)
