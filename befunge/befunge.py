#!/usr/bin/env python3

# Befunge interpreter
# Copyright © 2016 Filippo Baroni <filippo.gianni.baroni@gmail.com>
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Lesser General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Lesser General Public License for more details.
#
# You should have received a copy of the GNU Lesser General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from enum import Enum
import time
import sys


DEFAULT_PROGRAM = '''2>:1->1-00p::00g:       v
         v%-g00::_v#!`\\-_$$.v
     ^g00_                  v
 ^+1                        <
                  >       :.^'''

DIRECTIONS = {
    '<' : (-1, 0),
    '>' : (1, 0),
    '^' : (0, -1),
    'v' : (0, 1)
}

# (direction if zero, direction otherwise)
BRANCHES = {
    '_' : (DIRECTIONS['>'], DIRECTIONS['<']),
    '|' : (DIRECTIONS['v'], DIRECTIONS['^'])
}


def _div(x, y):
    # truncates towards zero
    q = abs(x) // abs(y)
    return q if (x < 0) == (y < 0) else -q


ARITHMETIC = {
    '+' : lambda x, y: x + y,
    '-' : lambda x, y: x - y,
    '*' : lambda x, y: x * y,
    '/' : _div,
    '%' : lambda x, y: x - y * _div(x, y),
    '`' : lambda x, y: 1 if x > y else 0
}


def to_int64(v):
    return (v + 2 ** 63) % 2 ** 64 - 2 ** 63


def to_char(v):
    """Convert a stack value to a character, or a space if it is not a valid code point."""
    v &= 0xFFFFFFFF
    if v > 0x10FFFF or 0xD800 <= v <= 0xDFFF:
        return ' '
    return chr(v)


class Mode(Enum):
    NORMAL = 'normal'
    STRING = 'string'
    HALTED = 'halted'


class BefungeError(Exception):
    pass


class ArithmeticFault(BefungeError):
    pass


class InvalidWrite(BefungeError):
    pass


class Code:

    def __init__(self, string):
        self.rows = [list(line[: -1] if line.endswith('\r') else line)
                     for line in string.split('\n')]

    def get(self, x, y):
        if 0 <= y < len(self.rows) and 0 <= x < len(self.rows[y]):
            return self.rows[y][x]
        return None

    def set(self, x, y, v):
        if not (0 <= y < len(self.rows) and 0 <= x < len(self.rows[y])):
            raise InvalidWrite('Cannot write outside the grid at ({}, {})'.format(x, y))
        self.rows[y][x] = v

    def wrap(self, x, y):
        # the row is resolved first, its own length then wraps the column
        if not self.rows:
            return (0, 0)
        y %= len(self.rows)
        if not self.rows[y]:
            return (0, 0)
        return (x % len(self.rows[y]), y)

    def __str__(self):
        return '\n'.join(''.join(row) for row in self.rows)


class Befunge:
    """Interpreter state for one run of a program.

    The state owns its grid, so self-modifying programs (via ``p``) never
    affect the source text or any other state built from it.
    """

    def __init__(self, code, x = 0, y = 0, direction = DIRECTIONS['>'],
                 mode = Mode.HALTED, debug = False):
        self.code = code
        self.x, self.y = x, y
        self.direction = direction
        self.mode = mode
        self.running = mode is not Mode.HALTED
        self.stack = []
        self.output = ''
        self.steps = 0
        self.debug = debug

    @property
    def cursor(self):
        return (self.x, self.y)

    @property
    def grid(self):
        return self.code.rows

    @property
    def halted(self):
        return self.mode is Mode.HALTED

    def step(self):
        if self.mode is Mode.HALTED:
            return self
        self.x, self.y = self.code.wrap(self.x + self.direction[0],
                                        self.y + self.direction[1])
        instr = self.code.get(self.x, self.y)
        if instr is None:
            instr = ' '
        self.steps += 1
        if self.mode is Mode.STRING and instr != '"':
            self.push(ord(instr))
            return self
        if self.debug:
            print('[# Step {:>5} at ({:>2}, {:>2}) executing \'{}\' with stack {} #]'
                  .format(self.steps, self.x, self.y, instr, self.stack), file = sys.stderr)
        try:
            self.exec_instruction(instr)
        except ZeroDivisionError:
            self.halt()
            raise ArithmeticFault('Division by zero at ({}, {})'.format(self.x, self.y))
        except InvalidWrite:
            self.halt()
            raise
        return self

    def exec_instruction(self, instr):
        # Arrows
        if instr in DIRECTIONS:
            self.direction = DIRECTIONS[instr]
        # Branches
        elif instr in BRANCHES:
            if_zero, otherwise = BRANCHES[instr]
            self.direction = if_zero if self.pop() == 0 else otherwise
        # Trampoline
        elif instr == '#':
            self.x, self.y = self.code.wrap(self.x + self.direction[0],
                                            self.y + self.direction[1])
        # End
        elif instr == '@':
            self.halt()
        # Digits
        elif instr in '0123456789':
            self.push(int(instr))
        # String mode
        elif instr == '"':
            self.mode = Mode.NORMAL if self.mode is Mode.STRING else Mode.STRING
        # Out
        elif instr == '.':
            self.output += '{} '.format(self.pop())
        elif instr == ',':
            self.output += to_char(self.pop())
        # Arith / Cmp
        elif instr in ARITHMETIC:
            y, x = self.pop(), self.pop()
            self.push(to_int64(ARITHMETIC[instr](x, y)))
        # Not
        elif instr == '!':
            self.push(1 if self.pop() == 0 else 0)
        # Duplicate
        elif instr == ':':
            v = self.pop()
            self.push(v)
            self.push(v)
        # Swap
        elif instr == '\\':
            y, x = self.pop(), self.pop()
            self.push(y)
            self.push(x)
        # Pop
        elif instr == '$':
            self.pop()
        # Get
        elif instr == 'g':
            y, x = self.pop(), self.pop()
            v = self.code.get(x, y)
            self.push(0 if v is None else ord(v))
        # Put
        elif instr == 'p':
            y, x, v = self.pop(), self.pop(), self.pop()
            self.code.set(x, y, to_char(v))
        # NOP, anything else included

    def halt(self):
        self.mode = Mode.HALTED
        self.running = False

    def pop(self):
        return self.stack.pop() if self.stack else 0

    def push(self, x):
        self.stack.append(x)


def reset(source, debug = False):
    return Befunge(Code(source), debug = debug)


def start(source, debug = False):
    return Befunge(Code(source), x = -1, mode = Mode.NORMAL, debug = debug)


def step(state):
    return state.step()


def steps_per_tick(interval):
    """Number of steps an animation tick of ``interval`` milliseconds runs."""
    # halves round up
    return int(1 / min(max(interval, 0.0001), 1.0) + 0.5)


def run(state, max_steps = None, tick = None, interval = None, out = None):
    """Drive ``state`` until it halts, writing its output to ``out`` as it grows."""
    if out is None:
        out = sys.stdout
    written = 0

    def flush():
        nonlocal written
        if len(state.output) > written:
            out.write(state.output[written :])
            out.flush()
            written = len(state.output)

    try:
        while state.running and (max_steps is None or state.steps < max_steps):
            if interval is not None:
                for i in range(steps_per_tick(interval)):
                    state.step()
                    if not state.running or state.steps == max_steps:
                        break
                flush()
                time.sleep(min(max(interval, 0), 5000) / 1000)
            elif tick is not None:
                begin_time = time.perf_counter()
                state.step()
                flush()
                if tick >= 0:
                    elapsed = time.perf_counter() - begin_time
                    if elapsed < tick:
                        time.sleep(tick - elapsed)
                else:
                    input()
            else:
                state.step()
                flush()
    finally:
        flush()
    return state


def main(argv = None):
    import argparse

    parser = argparse.ArgumentParser(description = 'Befunge interpreter',
    usage = '%(prog)s [-h] [<script> | -c <code>] [<options>]')
    code_group = parser.add_argument_group('code')
    code_group_mutex = code_group.add_mutually_exclusive_group()
    code_group_mutex.add_argument('script',
                            type = argparse.FileType('r'),
                            nargs = '?',
                            metavar = '<script>',
                            help = 'Befunge source file to execute')
    code_group_mutex.add_argument('-c', '--code',
                            metavar = '<code>',
                            help = 'string of Befunge instructions to execute')
    options_group = parser.add_argument_group('options')
    options_group.add_argument('-d', '--debug',
                               action = 'store_true',
                               help = 'trace every executed instruction on stderr')
    options_group.add_argument('-n', '--max-steps',
                               type = int,
                               default = None,
                               metavar = '<n>',
                               help = 'stop after <n> steps')
    options_group.add_argument('-s', '--show',
                               action = 'store_true',
                               help = 'print the final stack and step count on stderr')
    speed_group = options_group.add_mutually_exclusive_group()
    speed_group.add_argument('-i', '--interval',
                             type = float,
                             default = None,
                             metavar = '<ms>',
                             help = """animate execution, one tick every <ms> milliseconds;
                                       intervals below 1 run several steps per tick""")
    speed_group.add_argument('-t', '--tick',
                             type = float,
                             default = None,
                             metavar = '<tick>',
                             help = """wait at least <tick> seconds between instructions;
                                       if <tick> is a negative number, then wait for the user
                                       to press <Enter> before executing the next instruction""")
    args = parser.parse_args(argv)

    if args.script:
        codestr = args.script.read()
        args.script.close()
    elif args.code is not None:
        codestr = args.code
    else:
        codestr = DEFAULT_PROGRAM
    state = start(codestr, debug = args.debug)
    status = 0
    try:
        run(state, max_steps = args.max_steps, tick = args.tick, interval = args.interval)
    except BefungeError as e:
        print()
        print('Befunge! ' + str(e))
        status = 1
    except KeyboardInterrupt:
        pass
    else:
        print()
    if args.show:
        print('[# stack {} after {} steps #]'.format(state.stack, state.steps), file = sys.stderr)
    return status


if __name__ == '__main__':
    sys.exit(main())
