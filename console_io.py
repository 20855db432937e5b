"""
Console input/output for Game Rental System
Wraps the session's input and output streams
"""
import sys
from errors import InputClosed


class ConsoleIO:
    """
    Line oriented prompts on an output stream, answers from an input stream
    """

    def __init__(self, stdin=None, stdout=None):
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout

    def write(self, text=""):
        print(text, file=self.stdout)

    def prompt(self, text):
        """Print text and return the next input line without its line ending"""
        self.stdout.write(text)
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            raise InputClosed("End of input")
        return line.rstrip("\r\n")

    def read_choice(self):
        """
        Read a menu choice
        Keeps asking until an integer is entered; only end of input stops it
        """
        while True:
            answer = self.prompt("Please make your choice: ")
            try:
                return int(answer.strip())
            except ValueError:
                self.write("Your input is invalid!")
