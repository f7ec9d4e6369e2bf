# C8VM, a Chip-8 virtual machine.

# To the extent possible under law, the person who associated CC0 with
# C8VM has waived all copyright and related or neighboring rights
# to C8VM.

# You should have received a copy of the CC0 legalcode along with this
# work.  If not, see <http://creativecommons.org/publicdomain/zero/1.0/>.

import sys
import logging
import argparse
import random

from .constants import CYCLE_HZ
from .errors import Chip8Error, ProgramLoadError
from .frontend import Frontend
from .machine import Machine

log = logging.getLogger(__name__)

aparser = argparse.ArgumentParser(prog="c8vm", description="A Chip-8 virtual machine")
aparser.add_argument('program',
    help="A compiled Chip-8 program to load")
aparser.add_argument('--debug',
    help="Enable verbose debug logging, including an instruction trace",
    action="store_true")
aparser.add_argument('--permissive',
    help="Log and skip unknown opcodes instead of halting",
    action="store_true")
aparser.add_argument('--cycle-hz',
    help=f"Instructions executed per second (default {CYCLE_HZ})",
    metavar="N",
    type=int,
    default=CYCLE_HZ)
aparser.add_argument('--scale',
    help="Host pixels per Chip-8 pixel",
    metavar="N",
    type=int,
    default=8)
aparser.add_argument('--monitor',
    help="Show the register and RAM panels beside the display",
    action="store_true")
aparser.add_argument('--mute',
    help="Disable the sound timer tone",
    action="store_true")
aparser.add_argument('--seed',
    help="Seed for the RND instruction",
    metavar="N",
    type=int)


def read_program(path):
    try:
        with open(path, 'rb') as p:
            return p.read()
    except OSError as e:
        raise ProgramLoadError(f"Cannot read program {path}: {e}") from e


def build_machine(args):
    """Create a machine from parsed arguments and load its program"""
    rng = random.Random(args.seed)
    machine = Machine(strict=not args.permissive, rng=rng)
    log.info(f"Loading program {args.program}")
    machine.load_program(read_program(args.program))
    return machine


def main(argv=None):
    logging.basicConfig(level=logging.INFO)
    args = aparser.parse_args(argv)
    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    log.info("C8VM - A Chip-8 virtual machine")
    try:
        machine = build_machine(args)
    except ProgramLoadError as e:
        log.error(str(e))
        return 1

    try:
        Frontend(machine, scale=args.scale, cycle_hz=args.cycle_hz,
                 monitor=args.monitor, mute=args.mute).run()
    except Chip8Error as e:
        log.error(f"{e} (after {machine.cycles} cycles)")
        log.debug(repr(machine))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
