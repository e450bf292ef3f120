import logging

from . import core
from . import device


logger = logging.getLogger(__name__)


class Interpreter(object):
    def __init__(self):
        self.opcodes = {op.OPCODE: op for op in core.INSTRUCTIONS}

    def run(self, machine):
        if machine.state == core.Machine.FATAL:
            raise machine.error

        if machine.state == core.Machine.HALTED:
            return

        logger.info('run start')

        try:
            while True:
                self.step(machine)

        except core.Terminate:
            machine.state = core.Machine.HALTED

        except Exception as e:
            machine.state = core.Machine.FATAL
            machine.error = e
            logger.error("@{}: {}".format(machine.ip, e))
            raise

        logger.info('run stop')

    def step(self, machine):
        instruction = self.decode(machine)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("@{}: {}".format(machine.ip, instruction))

        target = instruction.execute(machine)

        if target is None:
            machine.ip += instruction.width()
        else:
            machine.ip = target

    def decode(self, machine):
        word = machine.memory.read(machine.ip)

        # a negative word has no opcode; python's modulo would invent one
        opcode = word % 100 if word >= 0 else word
        if opcode not in self.opcodes:
            raise core.InvalidOpcode(opcode, machine.ip)

        op = self.opcodes[opcode]
        modes = word // 100

        params = list()
        for index, kind in enumerate(op.PARAMS):
            mode = modes % 10
            modes //= 10

            value = machine.memory.read(machine.ip + 1 + index)

            if kind == 'w':
                params.append(core.Destination(mode, value))
            else:
                params.append(core.Operand(mode, value))

        return op(*params)


def run(machine):
    Interpreter().run(machine)


def execute(program, inputs=(), size=None):
    """Run a fresh machine over program and return everything it output"""
    output = device.Collector()
    run(core.Machine(program, inputs, output, size=size))
    return output.values
