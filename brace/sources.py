import io
import sys
from dataclasses import dataclass
from typing import BinaryIO, Iterator, List

from brace.errors import SourceError
from brace.types import ErrorVal


@dataclass
class Source:
    name: str
    stream: BinaryIO


class SourceSet:
    """Ordered collection of seekable program sources.

    The interpreter addresses a source by its index in this set, so the
    order in which sources are added is the order of the input list.
    """
    def __init__(self):
        self.sources: List[Source] = []

    def __len__(self) -> int:
        return len(self.sources)

    def __getitem__(self, index: int) -> Source:
        return self.sources[index]

    def __iter__(self) -> Iterator[Source]:
        return iter(self.sources)

    def __enter__(self) -> 'SourceSet':
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def add_stream(self, stream: BinaryIO, name: str) -> int:
        self.sources.append(Source(name, stream))
        return len(self.sources) - 1

    def add_bytes(self, data: bytes, name: str = '<bytes>') -> int:
        return self.add_stream(io.BytesIO(data), name)

    def add_text(self, text: str, name: str = '<string>') -> int:
        return self.add_bytes(text.encode('utf-8'), name)

    def open_file(self, filename: str) -> int:
        if filename == '-':
            # stdin cannot seek, keep a copy in memory instead
            return self.add_bytes(sys.stdin.buffer.read(), '<stdin>')
        try:
            f_ptr = open(filename, 'rb')
        except FileNotFoundError:
            raise SourceError(ErrorVal('FileNotFoundError', f'file {filename} not found'))
        except PermissionError:
            raise SourceError(ErrorVal('PermissionError', f'permission denied: {filename}'))
        except OSError as e:
            raise SourceError(ErrorVal('IOError', f'error opening {filename}: {e}'))
        return self.add_stream(f_ptr, str(filename))

    def close(self) -> None:
        for source in self.sources:
            source.stream.close()
        self.sources.clear()
