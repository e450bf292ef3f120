import collections


class IntcodeError(Exception):
    pass


class Terminate(Exception):
    pass


class ParseError(IntcodeError):
    pass


class InvalidOpcode(IntcodeError):
    def __init__(self, opcode, ip):
        self.opcode = opcode
        self.ip = ip
        super(InvalidOpcode, self).__init__(
                "invalid opcode {} at ip {}".format(opcode, ip))


class InvalidAddressingMode(IntcodeError):
    def __init__(self, mode):
        self.mode = mode
        super(InvalidAddressingMode, self).__init__(
                "invalid addressing mode {}".format(mode))


class IllegalWriteMode(IntcodeError):
    def __init__(self, value):
        self.value = value
        super(IllegalWriteMode, self).__init__(
                "cannot write to immediate operand #{}".format(value))


class MemoryOutOfBounds(IntcodeError):
    def __init__(self, address, capacity):
        self.address = address
        self.capacity = capacity
        super(MemoryOutOfBounds, self).__init__(
                "address {} outside memory of capacity {}".format(
                    address, capacity))


class ExhaustedInput(IntcodeError):
    def __init__(self, ip):
        self.ip = ip
        super(ExhaustedInput, self).__init__(
                "input exhausted at ip {}".format(ip))


class ChannelClosed(IntcodeError):
    pass


class MissingOutput(IntcodeError):
    pass


class Mode(object):
    POSITION = 0
    IMMEDIATE = 1
    RELATIVE = 2

    ALL = (POSITION, IMMEDIATE, RELATIVE)


class Operand(collections.namedtuple("Operand", "mode value")):
    def __new__(cls, mode, value):
        if mode not in Mode.ALL:
            raise InvalidAddressingMode(mode)

        return super(Operand, cls).__new__(cls, mode, value)

    def __str__(self):
        if self.mode == Mode.IMMEDIATE:
            return "#{}".format(self.value)

        if self.mode == Mode.RELATIVE:
            return "@{}".format(self.value)

        return str(self.value)

    def locate(self, machine):
        if self.mode == Mode.RELATIVE:
            return machine.base + self.value

        return self.value

    def read(self, machine):
        if self.mode == Mode.IMMEDIATE:
            return self.value

        return machine.memory.read(self.locate(machine))


class Destination(Operand):
    def __new__(cls, mode, value):
        if mode == Mode.IMMEDIATE:
            raise IllegalWriteMode(value)

        return super(Destination, cls).__new__(cls, mode, value)

    def address(self, machine):
        return machine.memory.check(self.locate(machine))


class Instruction(object):
    """
    Base for the ten instruction variants.

    PARAMS spells out the parameters that follow the instruction word, 'r'
    for an operand that is read and 'w' for a destination that is written.
    The width of an instruction is the instruction word plus its
    parameters. Executing an instruction returns the new instruction
    pointer when it jumps and None otherwise.

    """

    MNEUMONIC = None
    OPCODE = None
    PARAMS = ""

    @classmethod
    def width(cls):
        return 1 + len(cls.PARAMS)

    def __str__(self):
        return "{} {}".format(self.MNEUMONIC, ", ".join(str(p) for p in self)).rstrip()


class Add(Instruction, collections.namedtuple("Add", "op1 op2 dst")):
    MNEUMONIC = "ADD"
    OPCODE = 1
    PARAMS = "rrw"

    def execute(self, machine):
        val = self.op1.read(machine) + self.op2.read(machine)
        machine.memory.write(self.dst.address(machine), val)


class Multiply(Instruction, collections.namedtuple("Multiply", "op1 op2 dst")):
    MNEUMONIC = "MUL"
    OPCODE = 2
    PARAMS = "rrw"

    def execute(self, machine):
        val = self.op1.read(machine) * self.op2.read(machine)
        machine.memory.write(self.dst.address(machine), val)


class Input(Instruction, collections.namedtuple("Input", "dst")):
    MNEUMONIC = "INP"
    OPCODE = 3
    PARAMS = "w"

    def execute(self, machine):
        dst = self.dst.address(machine)
        machine.memory.write(dst, machine.pull())


class Output(Instruction, collections.namedtuple("Output", "op")):
    MNEUMONIC = "OUT"
    OPCODE = 4
    PARAMS = "r"

    def execute(self, machine):
        machine.output.send(self.op.read(machine))


class JumpIfTrue(Instruction, collections.namedtuple("JumpIfTrue", "test target")):
    MNEUMONIC = "JIT"
    OPCODE = 5
    PARAMS = "rr"

    def execute(self, machine):
        if self.test.read(machine) != 0:
            return self.target.read(machine)


class JumpIfFalse(Instruction, collections.namedtuple("JumpIfFalse", "test target")):
    MNEUMONIC = "JIF"
    OPCODE = 6
    PARAMS = "rr"

    def execute(self, machine):
        if self.test.read(machine) == 0:
            return self.target.read(machine)


class LessThan(Instruction, collections.namedtuple("LessThan", "op1 op2 dst")):
    MNEUMONIC = "LST"
    OPCODE = 7
    PARAMS = "rrw"

    def execute(self, machine):
        val = 1 if self.op1.read(machine) < self.op2.read(machine) else 0
        machine.memory.write(self.dst.address(machine), val)


class EqualTo(Instruction, collections.namedtuple("EqualTo", "op1 op2 dst")):
    MNEUMONIC = "EQU"
    OPCODE = 8
    PARAMS = "rrw"

    def execute(self, machine):
        val = 1 if self.op1.read(machine) == self.op2.read(machine) else 0
        machine.memory.write(self.dst.address(machine), val)


class AdjustRelativeBase(Instruction, collections.namedtuple("AdjustRelativeBase", "op")):
    MNEUMONIC = "ARB"
    OPCODE = 9
    PARAMS = "r"

    def execute(self, machine):
        machine.base += self.op.read(machine)


class Halt(Instruction, collections.namedtuple("Halt", "")):
    MNEUMONIC = "HLT"
    OPCODE = 99

    def execute(self, machine):
        raise Terminate()


INSTRUCTIONS = (
        Add,
        Multiply,
        Input,
        Output,
        JumpIfTrue,
        JumpIfFalse,
        LessThan,
        EqualTo,
        AdjustRelativeBase,
        Halt,
        )


class Memory(object):
    """
    Word addressed memory holding arbitrary precision integers.

    With no size the memory grows on demand: reading past the end yields 0
    and writing past the end extends it. A fixed size pre-allocates that
    many words and any access outside them raises MemoryOutOfBounds.

    """

    def __init__(self, program, size=None):
        self._ram = list(program)
        self.size = size

        if size is not None:
            if len(self._ram) > size:
                raise MemoryOutOfBounds(len(self._ram) - 1, size)

            self._ram.extend([0] * (size - len(self._ram)))

    def __len__(self):
        return len(self._ram)

    def __iter__(self):
        return iter(self._ram)

    def check(self, index):
        if index < 0 or (self.size is not None and index >= self.size):
            raise MemoryOutOfBounds(index, len(self))

        return index

    def read(self, index):
        self.check(index)
        return self._ram[index] if index < len(self._ram) else 0

    def write(self, index, value):
        self.check(index)

        if index >= len(self._ram):
            try:
                self._ram.extend([0] * (index + 1 - len(self._ram)))
            except (OverflowError, MemoryError):
                raise MemoryOutOfBounds(index, len(self)) from None

        self._ram[index] = value


class Machine(object):
    RUNNING = "running"
    HALTED = "halted"
    FATAL = "fatal"

    def __init__(self, program, input, output, size=None):
        self.memory = Memory(program, size)
        self.ip = 0
        self.base = 0
        self.input = iter(input)
        self.output = output
        self.state = Machine.RUNNING
        self.error = None

    @property
    def running(self):
        return self.state == Machine.RUNNING

    def pull(self):
        try:
            return next(self.input)
        except StopIteration:
            raise ExhaustedInput(self.ip) from None

    def snapshot(self):
        return tuple(self.memory)
