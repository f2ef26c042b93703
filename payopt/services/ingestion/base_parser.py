"""Abstract base class for input file parsers."""

from abc import ABC, abstractmethod
from typing import Generic, List, TypeVar

RecordT = TypeVar("RecordT")


class InputFileError(ValueError):
    """Raised when an input file cannot be turned into valid records."""


class BaseParser(ABC, Generic[RecordT]):
    """Base interface that every input parser must implement.

    Each parser is responsible for:
    1. Reading raw file bytes
    2. Validating every item into a typed record
    3. Failing the whole file on the first bad item, since a partial load
       would silently change the allocation
    """

    record_name: str

    @abstractmethod
    def parse(self, file_content: bytes, filename: str) -> List[RecordT]:
        """Parse file content and return validated records.

        Args:
            file_content: Raw bytes of the file.
            filename: Original filename, used in error messages.

        Returns:
            The records, in file order.

        Raises:
            InputFileError: If the file or any item is malformed.
        """
        pass
