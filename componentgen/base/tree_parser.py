from abc import ABC, abstractmethod


class SourceSyntaxError(Exception):
    def __init__(self, message: str, line: int, column: int):
        super().__init__(message)
        self.line = line
        self.column = column


class TreeParser(ABC):
    @abstractmethod
    def parse(self, text: str):
        pass

    @abstractmethod
    def parse_file(self, file_path: str):
        pass
