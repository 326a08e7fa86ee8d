# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Warning collection for DS_Store decoding

Copyright 2025 DNAi inc.
"""

from typing import List, Optional, TextIO, Iterator


class Diagnostics:
    """
    Ordered collection of non-fatal warnings raised while decoding.

    One instance is threaded through a decode and returned with its
    result. When a stream is given, every warning is also printed to
    it as soon as it is recorded.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        """
        Initialize the diagnostics sink.

        Args:
            stream: Optional text stream (e.g. sys.stderr) to echo warnings to
        """
        self.stream = stream
        self._messages: List[str] = []

    def warn(self, message: str) -> None:
        self._messages.append(message)
        if self.stream is not None:
            print(f"Warning: {message}", file=self.stream)

    @property
    def messages(self) -> List[str]:
        return list(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._messages))
