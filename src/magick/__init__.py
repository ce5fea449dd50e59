"""ImageMagick-style geometry parsing and resize/crop planning.

Submodules
----------
geometry
    The ``Geometry`` value type and its resize/crop computation.
errors
    Exception hierarchy.
identify
    Image discovery and dimension probing.
plan
    Batch planning of ``convert`` commands.
"""
