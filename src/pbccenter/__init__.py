"""
pbccenter: center a reference group of atoms in a periodic simulation box.

Re-centers a structure or every frame of a trajectory so that a reference
selection (typically the protein) sits in the middle of the box. The center
of the reference is computed with a circular mean along each periodic axis,
so a group split across a box boundary is still centered correctly.

Example usage:
    >>> from pbccenter import CenteringConfig, run_centering
    >>> config = CenteringConfig(structure="system.gro", output="centered.gro")
    >>> summary = run_centering(config)

Key modules:
    - core: circular-mean center, translation planning, periodic wrapping
    - io: structure, index-group, selection and trajectory adapters
    - pipeline: frame-by-frame streaming orchestration
    - cli: the ``pbccenter`` command

Note:
    MDAnalysis is imported lazily, so the configuration and core geometry
    modules can be used without it.
"""

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "AxisMask",
    "CenteringConfig",
    "CenteringPipeline",
    "CenteringSummary",
    "compute_center",
    "plan_translation",
    "translate_in_place",
    "run_centering",
]


def __getattr__(name: str):
    """Lazy import public objects only when accessed."""
    if name in ("AxisMask", "CenteringConfig"):
        from pbccenter import config

        return getattr(config, name)

    if name == "compute_center":
        from pbccenter.core.centroid import compute_center

        return compute_center

    if name in ("plan_translation", "translate_in_place"):
        from pbccenter.core import translation

        return getattr(translation, name)

    if name in ("CenteringPipeline", "CenteringSummary", "run_centering"):
        from pbccenter import pipeline

        return getattr(pipeline, name)

    raise AttributeError(f"module 'pbccenter' has no attribute {name!r}")


def __dir__():
    """Return list of available attributes for tab completion."""
    return __all__
