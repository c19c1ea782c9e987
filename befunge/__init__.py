from .befunge import (ArithmeticFault, Befunge, BefungeError, Code,
                      InvalidWrite, Mode, reset, start, step)

__all__ = ['ArithmeticFault', 'Befunge', 'BefungeError', 'Code',
           'InvalidWrite', 'Mode', 'reset', 'start', 'step']
