import argparse
import itertools
import logging
import logging.config
import os
import sys

from . import compiler
from . import core
from . import device
from . import interpreter
from . import pipeline

logger = logging.getLogger('intcode')


def configure_logging():
    cfg = os.path.expandvars("${XDG_CONFIG_HOME}/intcode/logging.cfg")
    if os.path.exists(cfg):
        logging.config.fileConfig(cfg)

    else:
        logging.basicConfig()


def phases(text):
    try:
        return [int(p) for p in text.split(',')]
    except ValueError:
        raise argparse.ArgumentTypeError("invalid phase list: {}".format(text))


def main(argv=sys.argv[1:], stdin=None, stdout=None):
    parser = argparse.ArgumentParser(prog='intcode')
    parser.add_argument("--dump", "-d", action='store_true')
    parser.add_argument("--log-level", "-l", choices=('debug', 'info', 'error'), default='error')
    parser.add_argument("--input", "-i", type=int, action='append', default=[])
    parser.add_argument("--stdin", action='store_true')
    parser.add_argument("--size", type=int, default=None)
    parser.add_argument("--assemble", "-a", action='store_true')
    parser.add_argument("--amplify", type=phases, default=None)
    parser.add_argument("--feedback", action='store_true')
    parser.add_argument("file")

    args = parser.parse_args(argv)

    logging_levels = {
            'debug': logging.DEBUG,
            'error': logging.ERROR,
            'info': logging.INFO,
            }

    logger.setLevel(logging_levels[args.log_level])

    stdout = stdout if stdout is not None else sys.stdout

    try:
        with open(args.file) as fp:
            text = fp.read()

        if args.assemble:
            program = compiler.Compiler().compile(text)
        else:
            program = compiler.parse(text)

        if args.amplify is not None:
            signal = pipeline.max_signal(program, args.amplify, loop=args.feedback)
            stdout.write('{}\n'.format(signal))
            return 0

        inputs = args.input
        if args.stdin:
            # -i values come first, then whatever arrives on stdin
            lines = device.Lines(stdin if stdin is not None else sys.stdin)
            inputs = itertools.chain(args.input, lines)

        machine = core.Machine(
                program,
                inputs,
                device.Terminal(stdout),
                size=args.size,
                )

        try:
            interpreter.run(machine)

        finally:
            if args.dump:
                stdout.write('\n')
                for index, value in enumerate(machine.snapshot()):
                    stdout.write('[{0:#06x}] {1}\n'.format(index, value))

    except (core.IntcodeError, OSError) as e:
        logger.error(str(e))
        return 1

    return 0
