"""Resize pipeline with guaranteed, ordered release of every resource.

``ResizeJob.build`` reads a source (stream or path), decodes it, lays it out,
renders it onto a new canvas and hands the canvas to a consumer, which is
usually the encoder writing to a destination stream or path.

Teardown order, whatever stage fails:

1. decoded source image is closed
2. the private in-memory copy of the source (if buffering) is closed
3. the source stream is closed, rewound, or left alone, per ``JobOptions``
4. the consumer runs (it closes the destination stream unless told not to)
5. the canvas is closed unless ``preserve_destination_buffer`` is set
"""

from __future__ import annotations

import os
from contextlib import ExitStack
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Callable, Optional, Union

from loguru import logger
from PIL import Image

from config import CONFIG
from .box_math import Size
from .decoding import decode_image
from .encoding import encode
from .instructions import Instructions
from .io_utils import copy_to_memory_stream, ensure_dir, is_seekable, open_read, open_write
from .layout import LayoutResult, layout
from .options import JobOptions
from .render import render


Consumer = Callable[[Image.Image, JobOptions], None]
Source = Union[str, os.PathLike, BinaryIO]
Destination = Union[str, os.PathLike, BinaryIO, Consumer]


class JobState(str, Enum):
    CREATED = "created"
    ACQUIRING = "acquiring"
    DECODING = "decoding"
    LAYING_OUT = "laying_out"
    RENDERING = "rendering"
    CONSUMING = "consuming"
    DISPOSING = "disposing"
    DONE = "done"
    FAILED = "failed"


@dataclass
class Job:
    """Working state of a single build call.

    The job owns ``source_image``, ``buffer`` and ``canvas``; it only borrows
    the caller's source stream.
    """

    options: JobOptions
    instructions: Instructions
    state: JobState = JobState.CREATED
    original_size: Optional[Size] = None
    layout: Optional[LayoutResult] = None
    source_image: Optional[Image.Image] = None
    buffer: Optional[BinaryIO] = None
    canvas: Optional[Image.Image] = None
    source_released: bool = False
    history: list = field(default_factory=list)

    def transition(self, state: JobState) -> None:
        logger.debug("Resize job {} -> {}", self.state.value, state.value)
        self.history.append(state)
        self.state = state


def _is_path(value) -> bool:
    return isinstance(value, (str, os.PathLike))


def _same_file(a, b) -> bool:
    return Path(a).resolve() == Path(b).resolve()


class ResizeJob:
    """Builds resized images; holds no state between calls.

    Subclasses may override :meth:`decode`, :meth:`layout`, :meth:`render` and
    :meth:`encode` to change a single stage.
    """

    def __init__(
        self,
        resample: str = CONFIG.defaults.resample,
        chunk_size: int = CONFIG.defaults.chunk_size,
    ):
        self.resample = resample
        self.chunk_size = chunk_size

    def build(
        self,
        source: Source,
        destination: Destination,
        options: Optional[JobOptions] = None,
        instructions: Optional[Instructions] = None,
    ) -> Job:
        """Resize ``source`` into ``destination``.

        Parameters
        ----------
        source
            Readable binary stream, or a path to open.
        destination
            Writable binary stream, a path, or a consumer
            ``consumer(canvas, options)`` receiving the rendered image.
        options
            Stream handling; defaults to closing everything and no buffering.
        instructions
            Validated resize instructions.

        Returns
        -------
        Job
            The finished job, in state ``DONE``.
        """

        if source is None:
            raise TypeError("source must not be None")
        if destination is None:
            raise TypeError("destination must not be None")
        if instructions is None:
            raise TypeError("instructions must not be None")
        options = options or JobOptions()

        if _is_path(source):
            # We open this handle, so nobody else could close or reuse it
            options = options.with_changes(leave_source_open=False, rewind_source=False)
            if _is_path(destination) and _same_file(source, destination):
                logger.debug("Source and destination are the same file, buffering source")
                options = options.with_changes(buffer_source=True)

        if _is_path(destination):
            consumer = self._path_consumer(destination, options, instructions)
        elif callable(destination):
            consumer = destination
        else:
            consumer = self._stream_consumer(destination, instructions)

        if _is_path(source):
            source = open_read(source)
        return self._build(source, consumer, options, instructions)

    def _path_consumer(self, path, options: JobOptions, instructions: Instructions) -> Consumer:
        if options.create_parent_directory:
            ensure_dir(Path(path).parent)

        def consume(canvas: Image.Image, opts: JobOptions) -> None:
            with open_write(path) as target:
                self.encode(canvas, target, instructions)
            logger.debug("Wrote {}", path)

        return consume

    def _stream_consumer(self, destination: BinaryIO, instructions: Instructions) -> Consumer:
        def consume(canvas: Image.Image, opts: JobOptions) -> None:
            try:
                self.encode(canvas, destination, instructions)
            finally:
                if not opts.leave_destination_open:
                    destination.close()

        return consume

    def _build(
        self,
        source: BinaryIO,
        consumer: Consumer,
        options: JobOptions,
        instructions: Instructions,
    ) -> Job:
        job = Job(options=options, instructions=instructions)
        original_position = source.tell() if options.rewind_source and is_seekable(source) else None

        try:
            try:
                with ExitStack() as teardown:
                    # Runs last: give the source back to the caller or close it
                    teardown.callback(self._release_source, job, source, original_position)

                    job.transition(JobState.ACQUIRING)
                    stream = source
                    if options.buffer_source:
                        job.buffer = copy_to_memory_stream(
                            source, entire_stream=True, chunk_size=self.chunk_size
                        )
                        teardown.callback(self._release_buffer, job)
                        stream = job.buffer
                        # Closing early is what allows writing back onto the same file
                        if not options.keeps_source_open:
                            source.close()
                            job.source_released = True
                            logger.debug("Closed source after buffering")

                    job.transition(JobState.DECODING)
                    job.source_image = self.decode(stream, instructions)
                    teardown.callback(self._release_image, job)
                    job.original_size = Size(*job.source_image.size)

                    job.transition(JobState.LAYING_OUT)
                    job.layout = self.layout(job.original_size, instructions)

                    job.transition(JobState.RENDERING)
                    job.canvas = self.render(job.source_image, job.layout, instructions)

                job.transition(JobState.CONSUMING)
                consumer(job.canvas, options)
            finally:
                job.transition(JobState.DISPOSING)
                self._release_canvas(job)
        except Exception:
            job.transition(JobState.FAILED)
            raise

        job.transition(JobState.DONE)
        return job

    def _release_image(self, job: Job) -> None:
        if job.source_image is not None:
            image, job.source_image = job.source_image, None
            image.close()

    def _release_buffer(self, job: Job) -> None:
        if job.buffer is not None:
            buffer, job.buffer = job.buffer, None
            buffer.close()

    def _release_source(self, job: Job, source: BinaryIO, original_position: Optional[int]) -> None:
        if job.source_released:
            return
        job.source_released = True
        if not job.options.keeps_source_open:
            source.close()
        elif original_position is not None:
            source.seek(original_position)

    def _release_canvas(self, job: Job) -> None:
        if job.canvas is None or job.options.preserve_destination_buffer:
            return
        canvas, job.canvas = job.canvas, None
        canvas.close()

    def decode(self, stream: BinaryIO, instructions: Instructions) -> Image.Image:
        return decode_image(stream, ignore_icc=instructions.ignore_icc)

    def layout(self, original_size: Size, instructions: Instructions) -> LayoutResult:
        return layout(original_size, instructions)

    def render(
        self, source: Image.Image, result: LayoutResult, instructions: Instructions
    ) -> Image.Image:
        return render(source, result, instructions, resample=self.resample)

    def encode(self, canvas: Image.Image, target: BinaryIO, instructions: Instructions) -> None:
        encode(canvas, target, instructions)


def build(
    source: Source,
    destination: Destination,
    instructions: Instructions,
    options: Optional[JobOptions] = None,
) -> Job:
    """Module-level shortcut for ``ResizeJob().build``."""
    return ResizeJob().build(source, destination, options, instructions)
