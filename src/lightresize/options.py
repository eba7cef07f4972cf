"""I/O handling options for a resize job."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntFlag


class JobFlag(IntFlag):
    """Legacy bit-mask spelling of :class:`JobOptions`."""

    NONE = 0
    LEAVE_SOURCE_OPEN = 1
    REWIND_SOURCE = 2
    LEAVE_DESTINATION_OPEN = 4
    PRESERVE_DESTINATION_BUFFER = 8
    CREATE_PARENT_DIRECTORY = 16
    BUFFER_SOURCE = 32


@dataclass(frozen=True)
class JobOptions:
    """How a job treats the streams and buffers it is given.

    Attributes
    ----------
    leave_source_open
        Do not close the source stream once it is no longer needed.
    rewind_source
        Seek the source back to its starting position afterwards. Implies
        ``leave_source_open``.
    leave_destination_open
        Do not close the destination stream after encoding; the caller must.
    preserve_destination_buffer
        Do not close the rendered canvas after the consumer returns; the
        caller becomes responsible for it.
    create_parent_directory
        Create missing parent directories of a destination path.
    buffer_source
        Copy the entire source into memory before decoding, so the source can
        be closed early. Required when reading and writing the same file.
    """

    leave_source_open: bool = False
    rewind_source: bool = False
    leave_destination_open: bool = False
    preserve_destination_buffer: bool = False
    create_parent_directory: bool = False
    buffer_source: bool = False

    def __post_init__(self) -> None:
        if self.rewind_source and not self.leave_source_open:
            object.__setattr__(self, "leave_source_open", True)

    @property
    def keeps_source_open(self) -> bool:
        return self.leave_source_open or self.rewind_source

    def with_changes(self, **changes: bool) -> "JobOptions":
        return replace(self, **changes)

    @classmethod
    def from_flags(cls, flags: JobFlag | int) -> "JobOptions":
        flags = JobFlag(flags)
        return cls(
            leave_source_open=JobFlag.LEAVE_SOURCE_OPEN in flags,
            rewind_source=JobFlag.REWIND_SOURCE in flags,
            leave_destination_open=JobFlag.LEAVE_DESTINATION_OPEN in flags,
            preserve_destination_buffer=JobFlag.PRESERVE_DESTINATION_BUFFER in flags,
            create_parent_directory=JobFlag.CREATE_PARENT_DIRECTORY in flags,
            buffer_source=JobFlag.BUFFER_SOURCE in flags,
        )
