import logging
import re

from . import core


logger = logging.getLogger(__name__)


class UnrecognizedInstruction(core.ParseError):
    pass


def parse(text):
    program = list()
    for index, entry in enumerate(text.strip().split(',')):
        try:
            program.append(int(entry))
        except ValueError:
            raise core.ParseError("entry {}: not an integer: {!r}".format(
                index, entry)) from None

    return program


def load(path):
    with open(path) as fp:
        return parse(fp.read())


class Compiler(object):
    """
    Assembles Intcode from a line oriented listing,

        # read a value and echo it back
        start:
        INP 100
        OUT 100         ; position mode
        JIT #1, #start  ; immediate mode jump
        DAT 0, 0

    Operands prefixed with '#' are immediate and operands prefixed with '@'
    are relative to the relative base; anything else is a position. An
    operand may be a label, which resolves to the address of the line that
    follows it. DAT emits its arguments verbatim.

    """

    DATA = "DAT"

    def __init__(self):
        self._opcodes = {op.MNEUMONIC: op for op in core.INSTRUCTIONS}
        self._label_pattern = re.compile('^[a-zA-Z_][-_0-9a-zA-Z]*:$')

    def compile(self, program):
        # Remove non-functional lines from the program
        lines = self.prepare(program)

        # Find any labels and create a map of their addresses
        labels = self.find_labels(lines)

        # Compile the instructions
        words = list()
        for line in lines:
            if self.is_label(line):
                continue

            if self.is_data(line):
                words.extend(self.parse_data(labels, line))
                continue

            if self.is_opcode(line):
                words.extend(self.parse_opcode(labels, line))
                continue

            raise UnrecognizedInstruction(line)

        return words

    def prepare(self, program):
        lines = [line.split(';')[0].strip() for line in program.splitlines()]
        lines = [line for line in lines if not self.is_comment(line)]
        return lines

    def find_labels(self, lines):
        labels = {}
        address = 0
        for line in lines:
            if self.is_label(line):
                label = self.parse_label(line)
                if label in labels:
                    raise core.ParseError("duplicate label {}".format(label))

                labels[label] = address
                continue

            address += len(self.split_arguments(line[3:])) + (
                    0 if self.is_data(line) else 1)

        return labels

    def is_comment(self, line):
        return not line or line.startswith('#')

    def is_label(self, line):
        return self._label_pattern.match(line)

    def is_data(self, line):
        return self.is_mneumonic(line, Compiler.DATA)

    def is_opcode(self, line):
        return any(self.is_mneumonic(line, m) for m in self._opcodes)

    def is_mneumonic(self, line, mneumonic):
        return line[:3] == mneumonic and (not line[3:] or line[3] == ' ')

    def parse_label(self, line):
        return line[:line.find(':')]

    def split_arguments(self, arguments):
        arguments = arguments.strip()
        if not arguments:
            return []

        return [arg.strip() for arg in arguments.split(',')]

    def parse_value(self, labels, text):
        if text in labels:
            return labels[text]

        try:
            return int(text)
        except ValueError:
            raise core.ParseError("unknown label or value {!r}".format(text)) from None

    def parse_data(self, labels, line):
        return [self.parse_value(labels, arg) for arg in self.split_arguments(line[3:])]

    def parse_opcode(self, labels, line):
        op = self._opcodes[line[:3]]
        arguments = self.split_arguments(line[3:])

        if len(arguments) != len(op.PARAMS):
            raise core.ParseError("{} takes {} operands, got {}".format(
                op.MNEUMONIC, len(op.PARAMS), len(arguments)))

        params = list()
        for kind, arg in zip(op.PARAMS, arguments):
            mode = core.Mode.POSITION
            if arg.startswith('#'):
                mode = core.Mode.IMMEDIATE
                arg = arg[1:]
            elif arg.startswith('@'):
                mode = core.Mode.RELATIVE
                arg = arg[1:]

            value = self.parse_value(labels, arg.strip())

            if kind == 'w':
                params.append(core.Destination(mode, value))
            else:
                params.append(core.Operand(mode, value))

        instruction = op(*params)
        logger.debug('{}'.format(instruction))

        word = op.OPCODE
        for index, param in enumerate(params):
            word += param.mode * 10 ** (index + 2)

        return [word] + [param.value for param in params]
