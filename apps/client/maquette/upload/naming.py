"""Storage keys for each variant's artifact.

These are the fixed file names the mobile app keeps in its documents
directory. Each new session overwrites them.
"""

from typing import Callable

from maquette.upload.types import Variant

Namer = Callable[[Variant], str]

DEFAULT_FILENAMES: dict[Variant, str] = {
    Variant.DEFAULT: "maquette_variants.zip",
    Variant.MATCH: "maquette_modified_rings.glb",
    Variant.INTERACTIVE: "maquette_interactive.glb",
    Variant.GESTURE: "maquette_gesture.png",
    Variant.NOMATCH: "maquette_modified_rings_nomatch.glb",
}


def default_namer(variant: Variant) -> str:
    return DEFAULT_FILENAMES[variant]
