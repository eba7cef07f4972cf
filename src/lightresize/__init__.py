"""Constrained image resizing with a managed stream lifecycle.

Submodules
----------
box_math
    Size/rectangle types and pure geometric helpers.
modes
    Fit, scale and output format enumerations.
errors
    Exception taxonomy.
instructions
    Validated resize instructions.
options
    Stream and buffer handling options for a job.
layout
    Copy rectangle, target rectangle and canvas size computation.
io_utils
    Stream copying, buffering and filesystem helpers.
decoding
    Source stream to Pillow image.
render
    Draws the laid-out source region onto a new canvas.
encoding
    JPEG and PNG encoders.
resize_job
    The build pipeline that ties the stages together.
simple
    Single-purpose max-constraint JPEG resize.
"""
