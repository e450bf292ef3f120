import collections
import itertools
import logging
import threading

from . import core
from . import device
from . import interpreter


logger = logging.getLogger(__name__)


class Channel(object):
    """
    A FIFO connecting one machine's output to another machine's input.

    The channel is both a sink (send) and a source (iteration). With the
    default capacity of 1 a sender blocks until the previous value has been
    taken, which keeps the stages of a pipeline in lock-step. A capacity of
    None makes the channel unbounded.

    Closing wakes every waiting thread. Receivers drain whatever is still
    buffered and then stop; sends after closing raise ChannelClosed.

    Disconnecting marks the receiver as gone. Values that still fit in the
    buffer are accepted and never read, but a send that would have to wait
    raises ChannelClosed instead of blocking forever.

    """

    def __init__(self, capacity=1):
        self.capacity = capacity
        self.closed = False
        self.disconnected = False
        self._buf = collections.deque()
        self._cond = threading.Condition()

    def _full(self):
        return self.capacity is not None and len(self._buf) >= self.capacity

    def send(self, value):
        with self._cond:
            while self._full() and not self.closed and not self.disconnected:
                self._cond.wait()

            if self.closed:
                raise core.ChannelClosed("send {} on closed channel".format(value))

            if self._full():
                raise core.ChannelClosed("send {} with no receiver".format(value))

            self._buf.append(value)
            self._cond.notify_all()

    def offer(self, value):
        with self._cond:
            if self.closed:
                raise core.ChannelClosed("send {} on closed channel".format(value))

            if self._full():
                return False

            self._buf.append(value)
            self._cond.notify_all()
            return True

    def disconnect(self):
        with self._cond:
            self.disconnected = True
            self._cond.notify_all()

    def close(self):
        with self._cond:
            self.closed = True
            self._cond.notify_all()

    def __iter__(self):
        return self

    def __next__(self):
        with self._cond:
            while not self._buf and not self.closed:
                self._cond.wait()

            if not self._buf:
                raise StopIteration

            value = self._buf.popleft()
            self._cond.notify_all()
            return value


class Pipeline(object):
    """Runs a fixed set of machines, one thread each, until all of them stop"""

    def __init__(self):
        self.stages = list()
        self.channels = list()
        self.errors = list()
        self._lock = threading.Lock()

    def channel(self, capacity=1):
        chan = Channel(capacity)
        self.channels.append(chan)
        return chan

    def add(self, name, machine, outlet=None, inlet=None):
        self.stages.append((name, machine, outlet, inlet))
        return machine

    def start(self):
        threads = list()
        for name, machine, outlet, inlet in self.stages:
            thread = threading.Thread(
                    name=name,
                    target=self._worker,
                    args=(name, machine, outlet, inlet),
                    daemon=True,
                    )
            thread.start()
            threads.append(thread)

        return threads

    def run(self):
        logger.info('pipeline start ({} stages)'.format(len(self.stages)))

        for thread in self.start():
            thread.join()

        logger.info('pipeline stop')

        if self.errors:
            raise self.errors[0]

    def abort(self):
        for chan in self.channels:
            chan.close()

    def _worker(self, name, machine, outlet, inlet):
        try:
            interpreter.run(machine)

        except Exception as e:
            with self._lock:
                self.errors.append(e)

            logger.error("{} failed: {}".format(name, e))
            self.abort()

        else:
            logger.debug("{} halted".format(name))
            if outlet is not None:
                outlet.close()

            if inlet is not None:
                inlet.disconnect()


def _stages(pipeline, program, phases, first, last):
    """
    Wire len(phases) machines in a chain. Stage 0 reads from first after its
    phase setting and the signal 0; the final stage writes to last.

    """
    phases = list(phases)
    source = first

    for index, phase in enumerate(phases):
        name = "amp-{}".format(chr(ord('A') + index))
        inputs = [phase, 0] if index == 0 else [phase]
        inputs = itertools.chain(inputs, source if source is not None else ())

        if index == len(phases) - 1:
            machine = core.Machine(program, inputs, last)
            pipeline.add(name, machine, outlet=first, inlet=source)
        else:
            chan = pipeline.channel()
            machine = core.Machine(program, inputs, chan)
            pipeline.add(name, machine, outlet=chan, inlet=source)
            source = chan


def _signal(result):
    if result.value is None:
        raise core.MissingOutput("final stage halted without output")

    return result.value


def amplify(program, phases):
    result = device.Cell()
    pipeline = Pipeline()
    _stages(pipeline, program, phases, None, result)
    pipeline.run()
    return _signal(result)


def feedback(program, phases):
    result = device.Cell()
    pipeline = Pipeline()
    ring = pipeline.channel()
    _stages(pipeline, program, phases, ring, device.Broadcast(ring, result))
    pipeline.run()
    return _signal(result)


def max_signal(program, phases, loop=False):
    run = feedback if loop else amplify
    return max(run(program, order) for order in itertools.permutations(phases))


class Split(object):
    """
    Producer/consumer split: a machine on its own thread streams output to
    a handler in the calling thread, grouped into tuples of `size` values.

    When the handler returns something other than None the value is offered
    to the machine's command channel. An offer never blocks, so a command
    is dropped if the machine has not yet taken the previous one.

    """

    def __init__(self, program, size=3, capacity=None, inputs=()):
        self.size = size
        self.pipeline = Pipeline()
        self.output = self.pipeline.channel(capacity)
        self.commands = self.pipeline.channel(1)
        self.machine = self.pipeline.add(
                "producer",
                core.Machine(program, itertools.chain(inputs, self.commands), self.output),
                outlet=self.output,
                inlet=self.commands,
                )

    def run(self, handler):
        threads = self.pipeline.start()
        group = list()

        try:
            for value in self.output:
                group.append(value)
                if len(group) < self.size:
                    continue

                command = handler(tuple(group))
                group = list()

                if command is not None and not self.commands.offer(command):
                    logger.debug("dropped command {}".format(command))

        finally:
            self.pipeline.abort()
            for thread in threads:
                thread.join()

        if group:
            logger.warning("discarding incomplete group {}".format(group))

        if self.pipeline.errors:
            raise self.pipeline.errors[0]
