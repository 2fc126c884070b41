''' MEEKLY : a meek Forth interpreter '''

import logging
import sys
import traceback
from argparse import ArgumentParser
from typing import List, Optional
import colorama
from colorama import Fore as fg

from atoms import Intrinsic, Error, ExecutionError
from parsing import Pattern
from execution import Runtime, Sink, MEMORY_SIZE
import patterns    # ignore 'Unused import' warning, actually usefull
import intrinsics  # ignore 'Unused import' warning, actually usefull

log = logging.getLogger(__name__)

class Interpreter:
    ''' The interpreter program '''

    def __init__(self, sink: Optional[Sink] = None, memory_size: int = MEMORY_SIZE, show_errors: bool = False) -> None:
        self.prompt = fg.LIGHTWHITE_EX + ' ok ' + fg.RESET
        self.show_errors = show_errors
        self.runtime = Runtime(sink if sink is not None else Interpreter.stdout, memory_size)
        for intrinsic in Intrinsic.classes: intrinsic().register(self.runtime)
        for pattern in Pattern.classes: pattern().register(self.runtime)
        for instruction in Interpreter.PRELUDE: self.execute(instruction)
        self.runtime.recent = ''

    PRELUDE = [
        ': over >r dup r> swap ; : rot >r swap r> swap ;',
        ': nip swap drop ; : tuck swap over ; : 2drop drop drop ;',
        ': ?dup dup if dup then ; : abs dup 0 < if negate then ;',
        ': max 2dup < if swap then drop ; : min 2dup > if swap then drop ;',
        ': space bl emit ; : spaces 0 ?do space loop ; : type .s ;',
    ]

    @staticmethod
    def stdout(byte: int) -> None:
        sys.stdout.buffer.write(bytes((byte,)))

    def execute(self, program: str) -> None:
        self.runtime.run(program)

    def execute_safely(self, program: str) -> bool:
        '''
        Runs a program, reports any error and keeps going.
        Definitions made before the error are kept.
        '''
        try:
            self.execute(program)
            return True
        except Error as error:
            if self.show_errors: traceback.print_exc()
            print(error, file=sys.stderr)
            return False
        except RecursionError:
            if self.show_errors: traceback.print_exc()
            print(ExecutionError('word nesting too deep'), file=sys.stderr)
            return False
        finally:
            sys.stdout.flush()

    def execute_file(self, path: str) -> bool:
        log.debug('loading %s', path)
        try:
            with open(path) as file: program = file.read()
        except OSError as error:
            print(Error(f'cannot read {path}: {error.strerror}'), file=sys.stderr)
            return False
        return self.execute_safely(program)

    def loop(self) -> None:
        while True:
            try:
                self.execute_safely(input(self.prompt))
            except EOFError:
                break
            except KeyboardInterrupt:
                print(Error('execution interupted by user'), file=sys.stderr)
            print()

def run_forth(program: str) -> str:
    ''' Runs a program on a fresh interpreter, returns its output. '''
    output = bytearray()
    Interpreter(output.append).execute(program)
    return output.decode('utf-8', errors='replace')

def main(argv: Optional[List[str]] = None) -> int:
    parser = ArgumentParser(
        prog='meekly',
        description='A minimal Forth interpreter.',
        )
    parser.add_argument(
        'files',
        nargs='*',
        help='source files, run in order',
        )
    parser.add_argument(
        '-i', '--interactive',
        action='store_true',
        help='run interactive shell even if source files are given',
        )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='trace every word',
        )
    parser.add_argument(
        '-e', '--show-errors',
        action='store_true',
        help='show the python stack of errors',
        )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format='%(name)s: %(message)s')
    colorama.just_fix_windows_console()

    interpreter = Interpreter(show_errors=args.show_errors)
    for path in args.files:
        if not interpreter.execute_file(path) and not args.interactive: return 1
    if args.interactive or len(args.files) == 0:
        interpreter.loop()
    return 0

# Main function calling
if __name__ == '__main__':
    sys.exit(main())
