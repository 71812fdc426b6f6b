"""Taichi runtime initialization.

The parallel integrator stores every value as 64-bit floats so its output
agrees with the serial NumPy path. Taichi must therefore be initialized with
``default_fp=ti.f64`` before ``core/integrator.py`` or ``core/renderer.py``
with the taichi backend is used.
"""

import logging

import taichi as ti

logger = logging.getLogger(__name__)

# Architectures accepted by init_backend
ARCHITECTURES = ("gpu", "cpu")


def init_backend(arch: str | None = None) -> str:
    """Initialize Taichi for the parallel integrator.

    Args:
        arch: "gpu", "cpu", or None to try the GPU and fall back to the CPU.

    Returns:
        The name of the architecture that was requested successfully.

    Raises:
        ValueError: If arch is not one of ARCHITECTURES.
    """
    if arch is not None and arch not in ARCHITECTURES:
        raise ValueError(f"Unknown architecture: {arch} (expected one of {ARCHITECTURES})")

    if arch == "cpu":
        ti.init(arch=ti.cpu, default_fp=ti.f64)
        return "cpu"

    # Use GPU if available, fall back to CPU
    try:
        ti.init(arch=ti.gpu, default_fp=ti.f64)
        selected = "gpu"
    except Exception:
        if arch == "gpu":
            raise
        logger.warning("GPU initialization failed, falling back to CPU")
        ti.init(arch=ti.cpu, default_fp=ti.f64)
        selected = "cpu"

    logger.info("Taichi initialized on %s", selected)
    return selected
